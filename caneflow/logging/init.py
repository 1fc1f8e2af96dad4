from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Console lines look like ``INFO message`` / ``WARN message`` / ``ERROR message``
and ``SUMMARY ...`` for the one-line run summary (custom level 25).
Library modules log through ``logging.getLogger(__name__)``; the ``caneflow``
logger configured here is the parent of all of them.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "SUMMARY_LABEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "caneflow"

# Between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25
SUMMARY_LABEL = "SUMMARY"

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter writing ``LABEL message`` with short level labels."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: SUMMARY_LABEL,
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        message = f"{level_label} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the ``caneflow`` logger (idempotent).

    Args:
        debug: lower the level to DEBUG (also applied on an existing logger)

    Returns:
        The configured application logger
    """
    global _logger

    level = logging.DEBUG if debug else logging.INFO

    if _logger is not None:
        if debug:
            _logger.setLevel(level)
            for handler in _logger.handlers:
                handler.setLevel(level)
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, SUMMARY_LABEL)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # Avoid duplicate lines through the root logger
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(line: str) -> None:
    """Log a summary line at SUMMARY level.

    Accepts either the bare ``key=value`` text or a line already rendered
    with its ``SUMMARY`` label; the label is written once by the formatter.
    """
    label = f"{SUMMARY_LABEL} "
    if line.startswith(label):
        line = line[len(label):]
    get_logger().log(SUMMARY_LEVEL, line)


def reset_logging() -> None:
    """Forget the configured logger. Mainly for tests."""
    global _logger
    _logger = None
