"""
Logging setup for the foodlog API.

Application loggers live under "foodlog". uvicorn's access log gets its
own handler so load balancer health checks don't flood the output.
"""

import logging
import logging.config
from typing import Any, Dict

HEALTH_PATHS = ("/healthz", "/health")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HealthCheckFilter(logging.Filter):
    """Drop access log lines for GET requests to the health endpoints."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not ("GET" in message and any(f"{path} " in message for path in HEALTH_PATHS))


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """dictConfig for the API process, also handed to uvicorn.run."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": {
            # uvicorn and uvicorn.error propagate to root
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            "foodlog": {"handlers": ["default"], "level": level, "propagate": False},
        },
        "root": {"level": level, "handlers": ["default"]},
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(get_logging_config(level))
