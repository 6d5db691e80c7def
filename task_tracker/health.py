"""Process health reporting: uptime and memory."""

import logging
import resource
import sys
import time
from datetime import UTC, datetime

from task_tracker import __version__
from task_tracker.models import HealthResponse, MemoryUsage, format_timestamp

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def _current_rss_bytes() -> int:
    """Resident set size of this process, read from /proc where available."""
    try:
        with open("/proc/self/statm", encoding="ascii") as f:
            pages = int(f.read().split()[1])
        return pages * resource.getpagesize()
    except (OSError, ValueError, IndexError):
        return _max_rss_bytes()


def _max_rss_bytes() -> int:
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS and kilobytes elsewhere
    return peak if sys.platform == "darwin" else peak * 1024


class HealthMonitor:
    """Tracks when the service started and reports its health."""

    def __init__(self, version: str = __version__) -> None:
        self.version = version
        self._started = time.monotonic()

    def reset(self) -> None:
        """Restart the uptime clock. Useful for testing."""
        self._started = time.monotonic()

    @property
    def uptime(self) -> int:
        """Whole seconds since start (or the last reset)."""
        return int(time.monotonic() - self._started)

    def status(self) -> HealthResponse:
        """Current health snapshot; logs each request for it."""
        health = HealthResponse(
            status="healthy",
            uptime=self.uptime,
            timestamp=format_timestamp(datetime.now(UTC)),
            memory=MemoryUsage(
                rss=round(_current_rss_bytes() / _MB),
                max_rss=round(_max_rss_bytes() / _MB),
            ),
            version=self.version,
        )
        logger.info("Health status requested - Status: %s, Uptime: %ss", health.status, health.uptime)
        return health
