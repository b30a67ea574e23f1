"""
OpenTelemetry instrumentation for the room catalog.

Traces incoming FastAPI requests and the outgoing httpx calls to the
layouts API when tracing is enabled.
"""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .logging_config import get_logger

logger = get_logger(__name__)


def configure_tracing(
    app: FastAPI,
    service_name: str,
    service_version: str,
    otlp_endpoint: str,
    excluded_urls: str = "/health,/metrics,/static",
) -> None:
    """
    Install an OTLP exporting tracer provider and instrument the app.

    Args:
        app: FastAPI application instance
        service_name: Name reported on every span
        service_version: Version reported on every span
        otlp_endpoint: OTLP gRPC collector endpoint
        excluded_urls: Comma-separated URL patterns that are not traced
    """
    resource = Resource.create(
        {
            SERVICE_NAME: service_name,
            SERVICE_VERSION: service_version,
        }
    )

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    )
    trace.set_tracer_provider(tracer_provider)

    HTTPXClientInstrumentor().instrument()
    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls=excluded_urls,
        tracer_provider=tracer_provider,
    )

    logger.info(
        "OpenTelemetry tracing enabled",
        extra={"extra_fields": {"otlp_endpoint": otlp_endpoint}},
    )
