"""
Request/Task context helpers.

We keep a small context (request_id, task_id, tick_id) in ContextVars.
FastAPI middleware, Celery tasks and generation ticks set these values so logs
become correlatable across a run.

No external dependencies.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_task_id: ContextVar[Optional[str]] = ContextVar("task_id", default=None)
_tick_id: ContextVar[Optional[str]] = ContextVar("tick_id", default=None)


def set_context(
    *,
    request_id: Optional[str] = None,
    task_id: Optional[str] = None,
    tick_id: Optional[str] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if task_id is not None:
        _task_id.set(task_id)
    if tick_id is not None:
        _tick_id.set(tick_id)


def clear_context() -> None:
    _request_id.set(None)
    _task_id.set(None)
    _tick_id.set(None)


def get_context() -> Dict[str, Any]:
    ctx: Dict[str, Any] = {}
    rid = _request_id.get()
    tid = _task_id.get()
    tick = _tick_id.get()

    if rid:
        ctx["request_id"] = rid
    if tid:
        ctx["task_id"] = tid
    if tick:
        ctx["tick_id"] = tick
    return ctx
