"""Logging setup shared by the Flask app and the job CLI."""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

# Package root logger, whichever import path the package was loaded under.
PACKAGE_LOGGER = __name__.rsplit(".", 2)[0]


class JobJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with level and logger name always present."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def build_logging_config(*, level: str = "INFO", json_output: bool = False) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "json": {"()": JobJsonFormatter, "format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_output else "standard",
            },
        },
        "loggers": {
            PACKAGE_LOGGER: {"level": level.upper(), "handlers": ["console"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def configure_logging(*, level: str = "INFO", json_output: bool = False) -> None:
    logging.config.dictConfig(build_logging_config(level=level, json_output=json_output))
