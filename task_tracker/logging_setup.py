"""Root logger configuration for the service."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

LOG_FILE_NAME = "app.log"


def resolve_level(name: str | int) -> int:
    """Map a level name like "info" or "warn" to a logging level."""
    if isinstance(name, int):
        return name
    normalized = name.strip().upper()
    if normalized == "WARN":
        normalized = "WARNING"
    level = logging.getLevelName(normalized)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    *,
    level: str | int = "info",
    log_dir: str | Path | None = "logs",
    log_to_file: bool = True,
) -> None:
    """
    Configure the root logger with:
    - a stderr handler at ``level``
    - optionally, a file handler writing everything at DEBUG to <log_dir>/app.log

    Uvicorn's loggers are pointed at the same handlers. Call once at startup.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(resolve_level(level))
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_to_file and log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path / LOG_FILE_NAME), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True

    logging.captureWarnings(True)
