"""OpenTelemetry tracing setup (OTLP/HTTP export, or console when no endpoint is set)."""

import logging

from rh_notifier import __version__
from rh_notifier.config import (
    DEPLOYMENT_ENVIRONMENT,
    OTLP_ENDPOINT,
    SERVICE_NAME,
    TRACING_ENABLED,
)

logger = logging.getLogger(__name__)
_initialized = False
_tracer_provider = None


def _resolve_endpoint() -> str:
    """Ensure HTTP endpoint includes /v1/traces path (OTLP spec)."""
    endpoint = OTLP_ENDPOINT.rstrip("/")
    if endpoint and not endpoint.endswith("/v1/traces"):
        endpoint = f"{endpoint}/v1/traces"
    return endpoint


def _build_resource():
    """Build Resource with service identity."""
    from opentelemetry.sdk.resources import Resource

    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": __version__,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
        }
    )


def _build_pipeline():
    from opentelemetry import trace
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

    provider = TracerProvider(resource=_build_resource())
    endpoint = _resolve_endpoint()
    if endpoint:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        logger.info("OTLP_ENDPOINT not set; exporting spans to console")
        exporter = ConsoleSpanExporter()
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return provider


def init_tracing() -> None:
    """Initialize tracing once at startup. No-op unless TRACING_ENABLED."""
    global _initialized, _tracer_provider
    if _initialized or not TRACING_ENABLED:
        return

    _tracer_provider = _build_pipeline()
    _initialized = True


def get_tracer():
    """Return the OpenTelemetry tracer (no-op tracer when tracing is not initialized)."""
    from opentelemetry import trace

    return trace.get_tracer("rh-notifier", __version__)


def shutdown_tracing() -> None:
    """Flush and shutdown the tracer provider so spans are exported before process exit."""
    from opentelemetry.sdk.trace import TracerProvider

    if isinstance(_tracer_provider, TracerProvider):
        _tracer_provider.force_flush(timeout_millis=5000)
        _tracer_provider.shutdown()
