"""Structured logging for the Notification Hubs SDK.

Emits one JSON object per line so that SDK diagnostics can be filtered by
component and field in any log aggregator.
"""
import logging
import json
import sys
from typing import Any

from .config import LOG_LEVEL


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured SDK logging."""

    def __init__(self, component: str):
        """Initialize formatter with component name.

        Args:
            component: Name of the SDK component (e.g., 'registrations')
        """
        super().__init__()
        self.component = component

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_obj = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "component": self.component,
        }

        # Add any extra fields from the record
        if hasattr(record, "extra"):
            log_obj.update(record.extra)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


class HubLogger:
    """Structured logger for SDK components.

    Example:
        logger = HubLogger("client")
        logger.info("Request sent", method="POST", path="/hub/registrations")
        logger.error("Request failed", status_code=409)
    """

    def __init__(self, component: str, level: str = LOG_LEVEL):
        """Initialize logger for an SDK component.

        Args:
            component: Name of the component, used as the logger name suffix
            level: Logging level name
        """
        self.component = component
        self.logger = self._setup_logger(level)

    def _setup_logger(self, level: str) -> logging.Logger:
        """Configure logger with JSON formatter."""
        logger = logging.getLogger(f"notificationhubs.{self.component}")
        logger.setLevel(getattr(logging, level, logging.INFO))
        logger.propagate = False

        # Remove existing handlers to avoid duplicates
        logger.handlers = []

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter(self.component))
        logger.addHandler(handler)

        return logger

    def _log(self, level: int, message: str, fields: dict) -> None:
        if not self.logger.isEnabledFor(level):
            return
        record = self.logger.makeRecord(
            self.logger.name, level, "", 0, message, (), None
        )
        record.extra = fields
        self.logger.handle(record)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with structured data.

        Args:
            message: Human-readable log message
            **kwargs: Additional structured data fields
        """
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with structured data.

        Args:
            message: Human-readable log message
            **kwargs: Additional structured data fields
        """
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message with structured data.

        Args:
            message: Human-readable error message
            **kwargs: Additional structured data fields (e.g., status_code)
        """
        self._log(logging.ERROR, message, kwargs)
