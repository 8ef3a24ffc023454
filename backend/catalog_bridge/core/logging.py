"""Logging for the catalog bridge.

Every component logs through a ContextualLogger: a LoggerAdapter carrying a
set of dimensions (event kind, product code, ...) that end up as fields of the
emitted record. Deployed environments get one JSON object per line; local
development gets readable text.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

from catalog_bridge.core.config import settings

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
    }
)


class JSONFormatter(logging.Formatter):
    """Formats records as JSON lines including contextual dimensions."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as a single JSON line."""
        log_entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if settings.ENVIRONMENT:
            log_entry["environment"] = settings.ENVIRONMENT

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that attaches dimensions to every record."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[Dict[str, Any]] = None):
        """Initialize the contextual logger.

        Args:
            logger: Underlying stdlib logger
            dimensions: Key/value pairs added to every record
        """
        super().__init__(logger, {})
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def process(self, msg, kwargs):
        """Merge dimensions into the record's extra fields."""
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions.

        Example:
            logger.with_context(product_code="P-100").info("Exported product")
        """
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, merged)


class LoggerConfigurator:
    """Creates contextual loggers with the bridge's handler configuration."""

    _configured = False

    @classmethod
    def _configure_root(cls) -> None:
        if cls._configured:
            return

        root = logging.getLogger("catalog_bridge")
        root.setLevel(settings.LOG_LEVEL)

        handler = logging.StreamHandler(sys.stdout)
        if settings.LOCAL_DEVELOPMENT:
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
        else:
            handler.setFormatter(JSONFormatter())

        root.addHandler(handler)
        root.propagate = False
        cls._configured = True

    @classmethod
    def configure_logger(
        cls, name: str, dimensions: Optional[Dict[str, Any]] = None
    ) -> ContextualLogger:
        """Get a contextual logger.

        Args:
            name: Logger name, expected to live under "catalog_bridge"
            dimensions: Dimensions attached to every record

        Returns:
            ContextualLogger wrapping the named stdlib logger.
        """
        cls._configure_root()
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger("catalog_bridge")
