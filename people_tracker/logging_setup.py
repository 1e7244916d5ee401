# people_tracker/logging_setup.py
import logging
import logging.config
from typing import Dict, Any, Optional

from people_tracker.config import DRIVER_LOG_LEVEL, LOG_LEVEL

# Module-level logger shared by routes and services; configured by setup_logging.
logger = logging.getLogger("api")

def build_logging_config(level: str = LOG_LEVEL) -> Dict[str, Any]:
    """
    JSON logs carrying the request's correlation id. Records are emitted with
    'timestamp' and 'level' keys; person and relationship ids travel as extras.
    """
    handler = {"handlers": ["default"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "correlation_id": {
                "()": "asgi_correlation_id.CorrelationIdFilter",
                "uuid_length": 32,
                "default_value": "-",
            },
        },
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(correlation_id)s %(name)s %(message)s",
                "rename_fields": {"asctime": "timestamp", "levelname": "level"},
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "filters": ["correlation_id"],
                "level": level,
            },
        },
        "loggers": {
            "api": {**handler, "level": level},
            "uvicorn": {**handler, "level": level},
            "motor": {**handler, "level": DRIVER_LOG_LEVEL},
            "pymongo": {**handler, "level": DRIVER_LOG_LEVEL},
        },
    }

def setup_logging(level: Optional[str] = None):
    logging.config.dictConfig(build_logging_config(level or LOG_LEVEL))
