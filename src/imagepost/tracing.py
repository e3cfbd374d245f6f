# src/imagepost/tracing.py

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    SimpleSpanProcessor,
    ConsoleSpanExporter,
)


def configure_tracing(service_name: str = "imagepost") -> None:
    """
    Configure OpenTelemetry tracing with a console exporter.

    Spans are printed to stdout. SimpleSpanProcessor exports synchronously so
    nothing writes to stdout after the process (or pytest capture) closes it.
    """
    # If there's already a provider, don't reconfigure
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
