"""
Logging setup for the worksheet service.

Two ids are carried through contextvars so generator and parser logs can be
tied back to a worksheet without passing ids around:
- ``request_id`` is bound by the request-id middleware
- ``session_id`` is bound by the worksheet session around generator calls

Production writes one JSON object per line; development writes short
text lines. Korean text is kept as-is in both.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)

CORRELATION_FIELDS = ("request_id", "session_id")
_UNSET = "-"

# Attributes every LogRecord has; anything else on a record came from extra=.
_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")


def current_session_id() -> Optional[str]:
    return session_id_var.get()


@contextmanager
def bind_session(session_id: str) -> Iterator[None]:
    """Attach ``session_id`` to every record logged inside the block."""
    token = session_id_var.set(session_id)
    try:
        yield
    finally:
        session_id_var.reset(token)


class CorrelationFilter(logging.Filter):
    """Fill request_id and session_id from context unless passed in extra=."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field, var in (("request_id", request_id_var), ("session_id", session_id_var)):
            if getattr(record, field, None) in (None, _UNSET):
                setattr(record, field, var.get() or _UNSET)
        return True


def structured_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed via extra=, minus the correlation ids."""
    fields = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_ATTRS or key in CORRELATION_FIELDS or value is None:
            continue
        fields[key] = value
    return fields


class JsonFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CORRELATION_FIELDS:
            value = getattr(record, field, None)
            if value and value != _UNSET:
                entry[field] = value
        entry.update(structured_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class DevFormatter(logging.Formatter):
    """``12:00:00 INFO  [name] req=.. sess=.. message key=value ...``"""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s sess=%(session_id)s %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        for field in CORRELATION_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, _UNSET)
        line = super().format(record)
        fields = structured_fields(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """Install a single stderr handler on the root logger."""
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(CorrelationFilter())
    handler.setFormatter(JsonFormatter() if environment == "production" else DevFormatter())
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
