"""
dictConfig-based logging for the API, the Celery worker and scripts.

LOG_FORMAT=json switches the console handler to python-json-logger so log
shippers get one object per line; every record carries the request id.
"""

import logging
import logging.config
import sys
from typing import Any, Dict

from floodwatch.core.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - [%(request_id)s] - %(name)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(request_id)s %(name)s %(message)s"

# Libraries that are chatty at INFO
NOISY_LOGGERS = ("urllib3", "kombu", "amqp")


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or "system" outside requests)."""

    def filter(self, record):
        from floodwatch.core.middleware import request_id_context

        record.request_id = request_id_context.get() or "system"
        return True


def _logger(level: str) -> Dict[str, Any]:
    return {"handlers": ["console"], "level": level.upper(), "propagate": False}


def build_logging_config() -> Dict[str, Any]:
    level = settings.log_level
    loggers = {
        "floodwatch": _logger(level),
        "uvicorn": _logger("INFO"),
        "uvicorn.access": _logger("INFO"),
        "celery": _logger("INFO"),
        "sqlalchemy.engine": _logger(settings.sqlalchemy_log_level),
    }
    loggers.update({name: _logger("WARNING") for name in NOISY_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": JSON_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": settings.log_format,
                "filters": ["request_id"],
            },
        },
        "root": {"handlers": ["console"], "level": level.upper()},
        "loggers": loggers,
    }


def setup_logging():
    """Apply the logging configuration; fall back to basicConfig if it is rejected."""
    try:
        logging.config.dictConfig(build_logging_config())
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger(__name__).error(f"Logging configuration rejected: {e}")
