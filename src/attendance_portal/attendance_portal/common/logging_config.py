"""Logging setup for the attendance portal.

Modules log through ``logging.getLogger(__name__)``; this module wires the
handlers once per process.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_logging_config(*, level: str = "INFO", json_logs: bool = False, log_file: Optional[str] = None) -> Dict[str, Any]:
    formatter = "json" if json_logs else "standard"
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": formatter,
        }
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": formatter,
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": PLAIN_FORMAT},
            "json": {"()": JsonFormatter, "format": JSON_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            "": {"handlers": list(handlers), "level": level},
            "apscheduler": {"level": "WARNING"},
            "werkzeug": {"level": "WARNING"},
        },
    }


def configure_logging(*, level: str = "INFO", json_logs: bool = False, log_file: Optional[str] = None) -> None:
    logging.config.dictConfig(build_logging_config(level=str(level).upper(), json_logs=json_logs, log_file=log_file))
