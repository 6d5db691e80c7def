"""Command-line entry point: serve the API with uvicorn."""

import argparse
import logging

import uvicorn

from task_tracker.config import load_settings
from task_tracker.logging_setup import setup_logging
from task_tracker.utils import use_system_collation

logger = logging.getLogger(__name__)

APP_FACTORY = "task_tracker.main:create_app"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser("task-tracker", description="Serve the Task Tracker API.")
    p.add_argument("--host", help="Interface to bind (default from settings)")
    p.add_argument("--port", type=int, help="Port to listen on (default from settings)")
    p.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        help="Console log level (default from settings)",
    )
    p.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = load_settings()

    host = args.host or settings.host
    port = args.port or settings.port
    log_level = args.log_level or settings.log_level

    setup_logging(level=log_level, log_dir=settings.log_dir, log_to_file=settings.log_to_file)
    use_system_collation()
    logger.info("Task Tracker server starting on http://%s:%d", host, port)
    logger.info("Press Ctrl+C to stop the server")

    # uvicorn installs SIGINT/SIGTERM handlers and drains connections on shutdown
    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=host,
        port=port,
        log_level=log_level,
        log_config=None,
        reload=args.reload,
    )
    logger.info("Server closed")


if __name__ == "__main__":
    main()
