"""Per-build context attached to every log record.

Holds the active trace/span ids and, once known, the book being indexed, so
JSON log lines from a build can be correlated with its spans.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from opentelemetry.trace import Span

trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Get current context, creating fresh ids on first use."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def with_otel_span(span: Span) -> dict:
    """Extract trace context from OpenTelemetry span."""
    ctx = span.get_span_context()
    return {
        "trace_id": format(ctx.trace_id, "032x"),
        "span_id": format(ctx.span_id, "016x"),
    }


def bind_span(span: Span) -> None:
    """Adopt ``span``'s trace and span ids, keeping extras such as the book."""
    trace_context.set({**get_trace_context(), **with_otel_span(span)})


def bind_book(title: str | None) -> None:
    """Tag subsequent log records with the book being indexed."""
    if not title:
        return
    trace_context.set({**get_trace_context(), "book": title})
