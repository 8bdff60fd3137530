"""Central logging configuration for Issue Copilot."""
from __future__ import annotations

import json
import logging
import os
import re
import sys
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, TextIO

_CONFIG_LOCK = threading.Lock()
_HANDLER: logging.StreamHandler | None = None
_CORRELATION_ID = os.getenv("IC_CORR_ID") or str(uuid.uuid4())

REDACTED = "***REDACTED***"

# Record attributes whose names contain one of these fragments are masked.
_SENSITIVE_KEYS = ("token", "secret", "password", "authorization", "api_key", "apikey")
# Credential shapes that may leak through free text (headers, URLs).
_SENSITIVE_VALUE = re.compile(r"\b(?:basic|bearer)\s+[A-Za-z0-9+/=._-]{8,}", re.IGNORECASE)

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def get_correlation_id() -> str:
    """Return the run-scoped correlation identifier."""

    return _CORRELATION_ID


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in _SENSITIVE_KEYS)


def redact(value: Any) -> Any:
    """Return ``value`` with credentials masked, recursing into containers."""

    if isinstance(value, str):
        return _SENSITIVE_VALUE.sub(REDACTED, value)
    if isinstance(value, dict):
        return {key: REDACTED if _is_sensitive_key(str(key)) else redact(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(redact(item) for item in value)
    return value


class _ContextFilter(logging.Filter):
    """Stamp the correlation id and mask credentials on every record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if not getattr(record, "correlation_id", None):
            record.correlation_id = _CORRELATION_ID

        for key in list(record.__dict__):
            if key in _STANDARD_ATTRS:
                continue
            if _is_sensitive_key(key):
                record.__dict__[key] = REDACTED
            else:
                record.__dict__[key] = redact(record.__dict__[key])

        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(redact(arg) for arg in record.args)
        elif isinstance(record.args, dict):
            record.args = redact(record.args)
        return True


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and key != "correlation_id"
    }


class _JsonFormatter(logging.Formatter):
    """One JSON object per line, extras merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", _CORRELATION_ID),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _StructuredFormatter(logging.Formatter):
    """Plain-text formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)sZ %(levelname)s %(name)s [corr=%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: D401, N802
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime(datefmt or self.datefmt or "%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        line = super().format(record)
        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return line


def _resolve_level(name: str | None) -> int:
    if not name:
        return logging.INFO
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handler(stream: TextIO | None) -> logging.StreamHandler:
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.addFilter(_ContextFilter())
    use_json = os.getenv("IC_LOG_JSON", "false").strip().lower() in {"1", "true", "yes"}
    handler.setFormatter(_JsonFormatter() if use_json else _StructuredFormatter())
    return handler


def configure_logging(level_override: str | None = None, *, stream: TextIO | None = None) -> None:
    """Install the root handler once; later calls only adjust the level.

    Passing ``stream`` swaps the installed handler for one writing to that
    stream (stdout by default).
    """

    global _HANDLER

    with _CONFIG_LOCK:
        root = logging.getLogger()
        if _HANDLER is None or _HANDLER not in root.handlers:
            _HANDLER = _build_handler(stream)
            root.handlers = [_HANDLER]
            if not level_override:
                root.setLevel(_resolve_level(os.getenv("IC_LOG_LEVEL", "INFO")))
        elif stream is not None:
            root.removeHandler(_HANDLER)
            _HANDLER = _build_handler(stream)
            root.addHandler(_HANDLER)

        if level_override:
            root.setLevel(_resolve_level(level_override))


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger instance."""

    configure_logging()
    return logging.getLogger(name)


__all__ = ["REDACTED", "configure_logging", "get_correlation_id", "get_logger", "redact"]
