"""
Logging configuration for the Tool Sync service

Every module logs under the "toolsync" namespace so one level setting
covers the API, the Celery workers and the command line script.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "toolsync"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log each request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def _resolve_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Send all log records to stdout

    Replaces existing root handlers, so calling it again (for example from
    both the API and the sync script) does not duplicate output.

    Args:
        level: Log level name; defaults to LOG_LEVEL from settings

    Returns:
        The "toolsync" logger
    """
    from .config import settings

    log_level = _resolve_level(level or settings.log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(log_level)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the "toolsync" namespace"""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
