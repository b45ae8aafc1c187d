"""OpenTelemetry tracing for index builds."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.trace import SpanKind, Status, StatusCode

from booksearch.observability.context import bind_span


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

    from booksearch.config import Settings

logger = logging.getLogger(__name__)

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(
    service_name: str = "booksearch-index",
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Install a tracer provider and cache a tracer for :func:`create_span`."""
    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    provider = TracerProvider(resource=Resource.create(attributes))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = provider.get_tracer(__name__)
    logger.debug("Tracing initialized for service: %s", service_name)
    return provider


def configure_trace_exporter(settings: Settings, provider: TracerProvider) -> SpanExporter | None:
    """Attach the span exporter selected by ``settings.trace_exporter``.

    ``console`` prints finished spans to stdout; ``otlp`` ships them over
    OTLP/HTTP to ``settings.otlp_endpoint`` (or the ``OTEL_EXPORTER_OTLP_*``
    environment defaults when unset). Spans are batched, so callers flush the
    provider before exiting.
    """
    if settings.trace_exporter == "none":
        return None

    exporter: SpanExporter
    if settings.trace_exporter == "console":
        exporter = ConsoleSpanExporter()
    else:
        exporter = OTLPSpanExporter(
            endpoint=settings.otlp_endpoint,
            timeout=settings.otlp_timeout_seconds,
        )

    provider.add_span_processor(BatchSpanProcessor(exporter))
    logger.info(
        "Trace export enabled (%s)",
        settings.trace_exporter,
        extra={"endpoint": settings.otlp_endpoint} if settings.trace_exporter == "otlp" else None,
    )
    return exporter


def get_tracer() -> Tracer:
    """Get the configured tracer."""
    if _tracer_holder["tracer"] is None:
        init_tracing()
    return _tracer_holder["tracer"]  # type: ignore[return-value]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span; log records emitted inside carry its ids."""
    tracer = get_tracer()
    with tracer.start_as_current_span(
        name,
        kind=kind,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        bind_span(span)

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
