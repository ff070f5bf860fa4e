"""Logging helpers providing structured JSON output with request/view context."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator


_STANDARD_ATTRS = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}

REQUEST_ID_CONTEXT: ContextVar[str | None] = ContextVar("request_id", default=None)
VIEW_ID_CONTEXT: ContextVar[str | None] = ContextVar("view_id", default=None)


class ContextFilter(logging.Filter):
    """Attach the current request ID and chart view ID (if any) to the log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = REQUEST_ID_CONTEXT.get()
        record.view_id = VIEW_ID_CONTEXT.get()
        return True


class JsonFormatter(logging.Formatter):
    """Render log records as structured JSON lines."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited docstring
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("request_id", "view_id"):
            value = getattr(record, key, None)
            if value:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = super().formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
            and not key.startswith("_")
            and key not in {"request_id", "view_id"}
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str, separators=(",", ":"))


@contextmanager
def bind_view_id(view_id: str) -> Iterator[None]:
    """Tag every record logged inside the block with ``view_id``."""

    token = VIEW_ID_CONTEXT.set(view_id)
    try:
        yield
    finally:
        VIEW_ID_CONTEXT.reset(token)


_CONFIGURED = False


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging once with JSON formatter + context filter."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.captureWarnings(True)
    _CONFIGURED = True


__all__ = [
    "REQUEST_ID_CONTEXT",
    "VIEW_ID_CONTEXT",
    "ContextFilter",
    "JsonFormatter",
    "bind_view_id",
    "setup_logging",
]
