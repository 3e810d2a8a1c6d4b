"""
OpenTelemetry tracing setup.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Tracer

from bullbench import __version__
from bullbench.config import get_settings

# Global tracer instance
_tracer: Tracer | None = None
_provider: TracerProvider | None = None


def setup_tracing() -> Tracer:
    """
    Set up OpenTelemetry tracing.

    Spans are exported over OTLP only when an endpoint is configured, so a
    plain benchmark run does not try to reach a collector.

    Returns:
        Tracer: The tracer instance.
    """
    global _tracer, _provider

    settings = get_settings()

    # Create resource with service info
    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": __version__,
        }
    )

    provider = TracerProvider(resource=resource)

    if settings.otel_exporter_otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(
            endpoint=settings.otel_exporter_otlp_endpoint,
            insecure=True,
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(provider)
    _provider = provider

    _tracer = trace.get_tracer(settings.otel_service_name)

    return _tracer


def get_tracer() -> Tracer:
    """
    Get the tracer instance.

    Falls back to the globally configured tracer (a no-op one unless
    `setup_tracing` ran), which keeps library code and tests export-free.

    Returns:
        Tracer: The tracer instance.
    """
    if _tracer is None:
        return trace.get_tracer("bullbench")
    return _tracer


def shutdown_tracing() -> None:
    """Flush pending spans and stop exporters."""
    global _tracer, _provider
    if _provider is not None:
        _provider.shutdown()
    _provider = None
    _tracer = None


def set_span_attributes(span: Any, **attributes: Any) -> None:
    """
    Set attributes on a span, skipping empty values.

    Args:
        span: The span to annotate.
        **attributes: Span attributes.
    """
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(key, value if isinstance(value, (int, float, bool)) else str(value))
