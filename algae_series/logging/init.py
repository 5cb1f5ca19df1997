from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Application logging: one stdout handler, labeled lines.

Output lines look like ``WARN no data points for site='Lake C'``. Module
loggers created with ``logging.getLogger(__name__)`` sit below the
``algae_series`` logger and reach the handler through propagation, so only the
package root is configured here.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "set_level",
    "reset_logging",
]

LOGGER_NAME = "algae_series"

# Load and series summaries sit between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25

LEVEL_LABELS: dict[int, str] = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message``; unknown levels fall back to their level name."""

    def format(self, record: logging.LogRecord) -> str:
        label = LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def _stdout_handler(stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    return handler


def setup_logging() -> logging.Logger:
    """Bind the ``algae_series`` logger to the current stdout.

    Safe to call repeatedly: after the first call the same logger is returned
    and no handler is added.
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.handlers.clear()
    app_logger.addHandler(_stdout_handler(sys.stdout))
    app_logger.setLevel(logging.INFO)
    # The root logger must not print these lines a second time
    app_logger.propagate = False

    _logger = app_logger
    return app_logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def set_level(level: int | str) -> None:
    """Apply ``level`` to the app logger and every handler on it (--debug)."""
    app_logger = get_logger()
    app_logger.setLevel(level)
    for handler in app_logger.handlers:
        handler.setLevel(level)


def reset_logging() -> None:
    """Forget the configured logger so the next setup rebinds stdout (tests)."""
    global _logger
    _logger = None
