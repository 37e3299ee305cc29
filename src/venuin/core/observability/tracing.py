"""OpenTelemetry tracing configuration.

Provides distributed tracing with automatic instrumentation for:
- FastAPI requests
- SQLAlchemy database queries

The context binder and the elevation service add their own spans
(``tenant_context.transaction``, ``elevation.assume_tenant``).

Traces are exported to an OTLP-compatible backend (Jaeger, Tempo, etc.)
when OTLP_ENDPOINT is configured.
"""

from typing import Any

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from venuin import __version__
from venuin.config import settings


log = structlog.get_logger()


def setup_tracing(app: FastAPI) -> bool:
    """Configure OpenTelemetry tracing for the application.

    Exports to an OTLP backend if configured, otherwise logs spans to the
    console in debug mode. Without either, tracing stays disabled and the
    manual spans become no-ops.

    Args:
        app: The FastAPI application instance to instrument

    Returns:
        True if a tracer provider was installed
    """
    resource = Resource.create(
        {
            "service.name": settings.app_name.lower().replace(" ", "-"),
            "service.version": __version__,
            "deployment.environment": settings.environment,
        }
    )

    provider = TracerProvider(resource=resource)

    if settings.otlp_endpoint:
        exporter = OTLPSpanExporter(
            endpoint=settings.otlp_endpoint,
            insecure=not settings.otlp_endpoint.startswith("https"),
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
        log.info(
            "tracing_configured",
            exporter="otlp",
            endpoint=settings.otlp_endpoint,
        )
    elif settings.debug:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        log.info("tracing_configured", exporter="console")
    else:
        log.info("tracing_disabled", reason="no OTLP_ENDPOINT configured")
        return False

    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls="health/.*,docs,redoc,openapi.json",
    )
    log.debug("instrumented_fastapi")

    log.info("tracing_setup_complete")
    return True


def instrument_sqlalchemy(engine: Any) -> None:
    """Instrument a SQLAlchemy engine for tracing.

    Args:
        engine: The AsyncEngine (its sync_engine is instrumented) or Engine
    """
    SQLAlchemyInstrumentor().instrument(engine=getattr(engine, "sync_engine", engine))
    log.debug("instrumented_sqlalchemy")


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance for manual span creation.

    Args:
        name: Name for the tracer (typically module name)

    Returns:
        OpenTelemetry Tracer instance

    Example:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("my_operation"):
            # ... do work
    """
    return trace.get_tracer(name)


def shutdown_tracing() -> None:
    """Shutdown tracing and flush any pending spans."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()
        log.info("tracing_shutdown_complete")
