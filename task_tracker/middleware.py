"""Request logging for the HTTP layer."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response

logger = logging.getLogger(__name__)


def level_for_status(status_code: int) -> int:
    """Log level for a response: error for 5xx, warning for 4xx, info otherwise."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def install_request_logging(app: FastAPI) -> None:
    """Log every request as ``METHOD path - status - Nms``."""

    @app.middleware("http")
    async def _log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        logger.debug("%s %s from %s", request.method, request.url.path, client)
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.error("%s %s - 500 - %dms", request.method, request.url.path, duration_ms)
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.log(
            level_for_status(response.status_code),
            "%s %s - %d - %dms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
