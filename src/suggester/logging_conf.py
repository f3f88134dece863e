"""Logging configuration for the CLI."""

from __future__ import annotations

import logging
from logging.config import dictConfig


def configure_logging(level: str = "WARNING") -> None:
    """Route all loggers to stderr with a single structured format."""
    level = level.upper()
    dictConfig(
        {
            "version": 1,
            "formatters": {
                "structured": {
                    "format": "%(asctime)s %(levelname)s %(name)s :: %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "level": level,
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {
                "handlers": ["console"],
                "level": level,
            },
            "disable_existing_loggers": False,
        }
    )
    logging.getLogger(__name__).debug("LOGGING_CONFIGURED level=%s", level)
