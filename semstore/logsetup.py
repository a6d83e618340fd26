"""Plain single-line log formatting for the bot."""

from __future__ import annotations

import logging
import sys
import time

LOGGER_NAME = "semstore"

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}


def _level_name(levelno: int) -> str:
    if levelno in _LEVEL_NAMES:
        return _LEVEL_NAMES[levelno]
    if levelno < logging.DEBUG:
        return "trace"
    return logging.getLevelName(levelno).lower()


class PlainFormatter(logging.Formatter):
    """Formats records as ``YYYY/MM/DD HH:MM:SS level message``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = time.strftime("%Y/%m/%d %H:%M:%S", time.localtime(record.created))
        return f"{timestamp} {_level_name(record.levelno)} {record.getMessage()}"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Set up the package logger with a plain formatter writing to stderr."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    handler = next(
        (h for h in logger.handlers if isinstance(h.formatter, PlainFormatter)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(PlainFormatter())
        logger.addHandler(handler)
    logger.propagate = False
    return logger