from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for weave.

Every record is printed as one line, ``LABEL message``, where LABEL is one of
DEBUG, INFO, WARN, ERROR or SUMMARY. Modules log through
``logging.getLogger(__name__)`` and so sit below the ``weave`` logger; only
that logger gets a handler, and the CLI owns its level.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "set_level",
    "get_logger",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "weave"

# Printed after the run, ranks between INFO and WARNING
SUMMARY_LEVEL = 25

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
    SUMMARY_LEVEL: "SUMMARY",
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        label = _LABELS.get(record.levelno, record.levelname)
        text = f"{label} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled stdout handler to the ``weave`` logger.

    Calling it again returns the logger configured the first time. Call
    reset_logging() first to build a fresh one (tests capture stdout that way).
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # weave output must not be printed twice by a root handler
    logger.propagate = False

    _logger = logger
    set_level(level)
    return logger


def set_level(level: int) -> None:
    """Change the level of the weave logger and its handlers (--debug)."""
    logger = get_logger()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Detach weave's handler and let records propagate again (tests, caplog)."""
    global _logger
    if _logger is not None:
        for handler in list(_logger.handlers):
            _logger.removeHandler(handler)
        _logger.propagate = True
    _logger = None
