"""Logging utilities for the CI dispatcher."""

from __future__ import annotations

import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "ci_dispatch"
LOG_FORMATS = ("text", "json")


def configure_logging(
    log_format: str = "text",
    verbose: bool = False,
    log_path: Optional[Path] = None,
) -> logging.Logger:
    if log_format not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {list(LOG_FORMATS)}")
    level = "DEBUG" if verbose else "INFO"
    formatter = "json" if log_format == "json" else "text"

    formatters = {
        "text": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    }
    handlers: dict[str, dict[str, object]] = {
        # stdout belongs to the collaborators.
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stderr,
            "formatter": formatter,
            "level": level,
        }
    }
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": str(log_path),
            "mode": "a",
            "encoding": "utf-8",
            "formatter": formatter,
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "handlers": list(handlers.keys()),
                    "level": level,
                    "propagate": False,
                }
            },
        }
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.debug(
        "Logging configured",
        extra={"log_path": str(log_path) if log_path else None, "log_format": log_format},
    )
    return logger
