"""Log context propagation across threads and async tasks."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


log_context: ContextVar[dict | None] = ContextVar("catalog_log_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_log_context() -> dict:
    """Current context, creating trace and span ids on first use."""
    ctx = log_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        log_context.set(ctx)
    return ctx


def update_span_id(span_id: str) -> None:
    """Update span_id while preserving trace_id and bound fields."""
    ctx = log_context.get() or {}
    log_context.set({**ctx, "span_id": span_id})


@contextmanager
def bind_log_context(**fields: object) -> Iterator[dict]:
    """Attach ``fields`` to every log record emitted inside the block."""
    ctx = {**get_log_context(), **fields}
    token = log_context.set(ctx)
    try:
        yield ctx
    finally:
        log_context.reset(token)
