"""
Logging configuration for the API process.

Application loggers live under `taskmanager` and follow LOG_LEVEL. Uvicorn's
server and access loggers stay at INFO; access lines for health probes are
dropped so liveness checks do not flood the output.
"""

import logging
from typing import Any, Dict

HEALTH_PATHS = ("/health", "/healthz")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access lines for GET requests on the health endpoints."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        return not ("GET" in message and any(f"{path} " in message for path in HEALTH_PATHS))


def _logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build a dictConfig for the API process.

    Args:
        level: Level for application loggers and the root logger

    Returns:
        Dictionary accepted by logging.config.dictConfig and uvicorn's log_config
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_probes": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": LOG_FORMAT},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_probes"],
            },
        },
        "loggers": {
            # uvicorn.error propagates here
            "uvicorn": _logger("default", "INFO"),
            "uvicorn.access": _logger("access", "INFO"),
            "taskmanager": _logger("default", level),
        },
        "root": {"level": level, "handlers": ["default"]},
    }
