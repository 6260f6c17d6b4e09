"""
Logging Configuration

Single stdout handler shared by the API process and the maintenance scripts.
"""

import sys
from logging.config import dictConfig
from typing import Any

from mod_notes.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers and the level they are pinned to
QUIET_LOGGERS = {
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
    "sqlalchemy.engine": "WARNING",
    "alembic": "INFO",
}


def build_logging_config(level: str) -> dict[str, Any]:
    """``dictConfig`` payload with every logger writing to one console handler."""
    loggers: dict[str, Any] = {
        name: {"level": pinned, "handlers": ["console"], "propagate": False}
        for name, pinned in QUIET_LOGGERS.items()
    }
    loggers["mod_notes"] = {"level": level, "handlers": ["console"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": loggers,
    }


def setup_logging(level: str | None = None) -> None:
    """
    Configure logging for the process.

    Args:
        level: Overrides ``settings.LOG_LEVEL`` (scripts pass ``--log-level``).
    """
    dictConfig(build_logging_config((level or settings.LOG_LEVEL).upper()))
