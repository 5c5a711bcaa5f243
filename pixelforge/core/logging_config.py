"""Logging configuration for the service."""

import logging.config
import os
from typing import Any, Dict, Optional

LOGGING_CONFIG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "uvicorn.access": {"level": "WARNING"},
        "PIL": {"level": "WARNING"},
    },
    "root": {
        "level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "handlers": ["console"],
    },
}


def setup_logging(level: Optional[str] = None) -> None:
    """Apply ``LOGGING_CONFIG``, optionally overriding the root level."""
    if level is None:
        logging.config.dictConfig(LOGGING_CONFIG)
        return

    config = {**LOGGING_CONFIG, "root": {**LOGGING_CONFIG["root"], "level": level}}
    logging.config.dictConfig(config)
