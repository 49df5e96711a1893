"""Logging configuration.

Usage:
    from lunanul.core.logging import logger

    ledger_logger = logger.with_context(component="usage_ledger")
    ledger_logger.info("Rolled over counter")

Dimensions passed to ``with_context`` are attached to every record and
rendered by both the text and the JSON formatter.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional

from lunanul.core.config import LogFormat, settings

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter that appends context dimensions."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        dims = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not dims:
            return base
        rendered = " ".join(f"{key}={value}" for key, value in sorted(dims.items()))
        return f"{base} | {rendered}"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that carries a dict of context dimensions and a prefix."""

    def __init__(
        self,
        logger: logging.Logger,
        dimensions: Optional[dict[str, Any]] = None,
        prefix: str = "",
    ) -> None:
        """Wrap ``logger`` with fixed dimensions and an optional message prefix."""
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions = dict(dimensions or {})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, Any]:
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return f"{self.prefix}{msg}", kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with ``dimensions`` merged into the current ones."""
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, merged, self.prefix)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a new logger that prepends ``prefix`` to every message."""
        return ContextualLogger(self.logger, self.dimensions, prefix)


class LoggerConfigurator:
    """Builds configured loggers from settings."""

    _configured = False

    @classmethod
    def _build_handler(cls) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        if settings.LOG_FORMAT == LogFormat.JSON:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(TextFormatter())
        return handler

    @classmethod
    def configure_root(cls) -> None:
        """Attach the lunanul handler once; repeated calls are no-ops."""
        if cls._configured:
            return
        root = logging.getLogger("lunanul")
        root.setLevel(settings.LOG_LEVEL)
        root.addHandler(cls._build_handler())
        root.propagate = False
        cls._configured = True

    @classmethod
    def configure_logger(
        cls,
        name: str,
        dimensions: Optional[dict[str, Any]] = None,
    ) -> ContextualLogger:
        """Return a ContextualLogger for ``name`` carrying ``dimensions``."""
        cls.configure_root()
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger("lunanul")
