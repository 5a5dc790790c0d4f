"""Logging for the statement_scanner package. The CLI configures it once at startup."""
import logging
import os
import sys
from typing import IO, Optional, Union

PACKAGE_LOGGER = "statement_scanner"
LOG_LEVEL_ENV = "STATEMENT_SCANNER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def resolve_level(level: Union[int, str, None] = None) -> int:
    """
    Turn a level name or number into a logging level.

    Falls back to STATEMENT_SCANNER_LOG_LEVEL, then WARNING, when the
    level is missing or not recognized.
    """
    for candidate in (level, os.getenv(LOG_LEVEL_ENV)):
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str) and candidate.strip():
            name = candidate.strip().upper()
            if name.isdigit():
                return int(name)
            numeric = logging.getLevelName(name)
            if isinstance(numeric, int):
                return numeric
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Send package logs to a stream. Later calls are ignored.

    Args:
        level: Level name or number (defaults to the environment, then WARNING)
        fmt: Optional log format
        stream: Where to write (defaults to stderr)
    """
    global _configured
    if _configured:
        return

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(level))
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Module logger; stays silent until configure_logging is called"""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
