"""
Telemetry module for OpenTelemetry + Application Insights.

Configures distributed tracing for the grounded chat pipeline.
"""

import logging

from azure.monitor.opentelemetry.exporter import AzureMonitorTraceExporter
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

SERVICE_NAME = "search-grounded-chat"

_tracer: trace.Tracer | None = None


def setup_telemetry(connection_string: str, service_version: str = "0.1.0") -> TracerProvider:
    """
    Install a tracer provider, exporting to Application Insights when configured.

    Args:
        connection_string: Application Insights connection string.
                          If empty, spans are recorded but not exported.
        service_version: Reported as the service.version resource attribute.

    Returns:
        The installed provider; shut it down on exit to flush queued spans.
    """
    global _tracer

    resource = Resource.create({"service.name": SERVICE_NAME, "service.version": service_version})
    provider = TracerProvider(resource=resource)

    if connection_string:
        exporter = AzureMonitorTraceExporter(connection_string=connection_string)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("Application Insights telemetry enabled.")
    else:
        logger.info("No connection string provided. Telemetry export disabled.")

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(SERVICE_NAME)
    return provider


def get_tracer() -> trace.Tracer:
    """Return the application tracer, initializing a no-op if not set up."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SERVICE_NAME)
    return _tracer
