"""
Structured logging configuration.

Provides JSON-formatted logs for better parsing and aggregation.
The library itself only emits through module loggers under the
"ride_analytics" namespace; hosts call setup_logging() once at startup
to attach a handler to that namespace.
"""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ride_analytics.core.config import Settings, settings as default_settings

PACKAGE_LOGGER = "ride_analytics"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging, tagged with the environment."""

    def __init__(self, environment: Optional[str] = None):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if self.environment:
            log_data["environment"] = self.environment

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


def setup_logging(
    config: Optional[Settings] = None,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Configure the ride_analytics logger (or another named logger).

    Uses JSON format in production, text format in development. The
    configured logger stops propagating so records aren't emitted twice
    by a host's root handlers.
    """
    config = config or default_settings
    log_level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)

    if config.LOG_FORMAT == "json" or config.ENVIRONMENT == "production":
        formatter: logging.Formatter = JSONFormatter(environment=config.ENVIRONMENT)
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    package_logger = logging.getLogger(logger_name)
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    # Replace handlers from an earlier call
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    return package_logger
