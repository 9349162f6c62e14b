"""Logging setup for carematch.

Rankings and reports are written to stdout by the CLI, so log records go
to a separate stream (stderr unless told otherwise).
"""

import logging
import sys
from typing import TextIO

LOGGER_NAME = "carematch"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Name given to the handler installed by configure_logging
HANDLER_NAME = "carematch-console"


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _find_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    return None


def configure_logging(
    level: str | int | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the application logger.

    Calling this again adjusts the level of the existing console handler
    instead of stacking a second one. Passing a different ``stream``
    replaces the handler.

    Args:
        level: Level name (DEBUG, INFO, ...) or numeric level. Unknown
               names and None resolve to INFO.
        format_string: Format string for log records.
        date_format: Format string for timestamps.
        stream: Destination for log records. Defaults to stderr.

    Returns:
        The ``carematch`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    log_level = _resolve_level(level)
    logger.setLevel(log_level)

    target = stream if stream is not None else sys.stderr
    handler = _find_handler(logger)
    if handler is not None and getattr(handler, "stream", None) is not target:
        logger.removeHandler(handler)
        handler = None

    if handler is None:
        handler = logging.StreamHandler(target)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(format_string, datefmt=date_format))
        logger.addHandler(handler)

    handler.setLevel(log_level)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``carematch.<name>`` child logger."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Drop handlers and restore propagation. Used by tests."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
