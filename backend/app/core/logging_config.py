"""
Central logging configuration.

- One shared logging setup for FastAPI, uvicorn and the Celery worker/beat.
- JSON lines on stdout for easy aggregation.
- Every record carries request_id / task_id / tick_id from request_context.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.config import dictConfig

from app.core.request_context import get_context

# LogRecord attributes that are never copied into the JSON payload
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
        "exc_info",
        "exc_text",
        "stack_info",
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
    }
)


def _jsonable(value):
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(get_context())

        # `extra={...}` fields
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_") or key in payload:
                continue
            payload[key] = _jsonable(value)

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def configure_logging() -> None:
    """
    Call once at process startup (FastAPI + Celery).
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    def _console(propagate: bool = False) -> dict:
        return {"level": level, "handlers": ["console"], "propagate": propagate}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "app.core.logging_config.JsonFormatter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stdout,
                }
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                "uvicorn": _console(),
                "uvicorn.error": _console(),
                "uvicorn.access": _console(),
                "celery": _console(),
                # SDK transport chatter
                "httpx": {"level": "WARNING"},
                "google_genai": {"level": "WARNING"},
            },
        }
    )
