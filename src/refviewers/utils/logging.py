"""Logging setup for refviewers.

Module loggers are children of the ``refviewers`` logger, which owns the
only handler. Output goes to stderr so that commands printing data on
stdout (``refviewers convert``) stay pipeable. ``configure_logging`` can be
called again at any time, e.g. by the CLI's ``--verbose`` flag, to swap the
level or format.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from ..config.settings import settings

PACKAGE_LOGGER = "refviewers"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


def configure_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """(Re)install the package handler; unset arguments fall back to settings."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    if (log_format or settings.log_format) == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    return package_logger


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()
    return logging.getLogger(name)
