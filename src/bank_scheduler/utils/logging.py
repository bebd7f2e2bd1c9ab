"""Logging setup and helpers.

Request correlation uses a context variable so every coroutine handling a
call logs under the same request ID without passing it around.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bank_scheduler.config import get_settings

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_LOGGER_PREFIX = "bank_scheduler"


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the request ID for the current context, generating one if needed."""
    value = request_id or str(uuid.uuid4())
    _request_id.set(value)
    return value


def get_request_id() -> Optional[str]:
    """Get the request ID for the current context."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Attach the current request ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON."""

    _reserved = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
        "message",
        "asctime",
        "request_id",
    }

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        for key, value in record.__dict__.items():
            if key not in self._reserved and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """Configure root logging from settings (or explicit overrides)."""
    settings = get_settings()
    level = (level or settings.log_level).upper()
    json_output = settings.log_json if json_output is None else json_output

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s"
            )
        )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # SQL echo is controlled by DATABASE_ECHO, keep the engine quiet otherwise
    if not settings.database.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under the application."""
    if name.startswith(_LOGGER_PREFIX):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def log_database_query(operation: str, table: str, duration_ms: float, **extra: Any) -> None:
    """Log a storage call with its duration."""
    get_logger("database").debug(
        f"{operation} on {table} took {duration_ms:.2f}ms",
        extra={"operation": operation, "table": table, "duration_ms": duration_ms, **extra},
    )


def log_error(exc: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with structured context."""
    details = getattr(exc, "details", None)
    get_logger("errors").error(
        f"{type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_details": details,
            "context": context or {},
        },
    )
