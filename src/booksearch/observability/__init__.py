"""Observability helpers: structured logging and OpenTelemetry tracing."""

from booksearch.observability.context import get_trace_context, set_trace_context, trace_context
from booksearch.observability.logging import JsonFormatter, configure_logging
from booksearch.observability.tracing import configure_trace_exporter, create_span, get_tracer, init_tracing


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "configure_trace_exporter",
    "create_span",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "trace_context",
]
