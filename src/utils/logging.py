"""Logging setup for the Jellofin server."""

import logging
import sys
from typing import Literal

from src.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every request or query at INFO/DEBUG
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "passlib": logging.ERROR,
    "PIL": logging.WARNING,
    "watchfiles": logging.WARNING,
}


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None
) -> None:
    """Configure the root logger to write to stdout.

    Args:
        level: Log level. Defaults to the LOG_LEVEL setting, falling back
            to INFO in production and DEBUG elsewhere.
    """
    settings = get_settings()
    if level is None:
        level = settings.log_level or ("INFO" if settings.is_production else "DEBUG")

    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """Logger wrapper that prefixes every message with [key=value] pairs.

    Usage:
        log = LogContext(logger, collection="Movies")
        log.info("scan started")  # "[collection=Movies] scan started"
    """

    def __init__(self, logger: logging.Logger, **context: str) -> None:
        self.logger = logger
        self.prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def _log(self, level: int, msg: str) -> None:
        self.logger.log(level, f"{self.prefix} {msg}")

    def debug(self, msg: str) -> None:
        self._log(logging.DEBUG, msg)

    def info(self, msg: str) -> None:
        self._log(logging.INFO, msg)

    def warning(self, msg: str) -> None:
        self._log(logging.WARNING, msg)
