from __future__ import annotations

import logging

LOGGER_NAME = "wallarm_client"


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def setup_logging(verbose: bool) -> None:
    """Set levels on the client's own loggers; handlers are left to the application."""
    get_logger().setLevel(logging.INFO if verbose else logging.WARNING)
    # httpx is noisy at DEBUG
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.DEBUG if verbose else logging.WARNING)
