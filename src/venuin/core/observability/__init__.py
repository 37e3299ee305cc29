"""Observability: OpenTelemetry tracing setup."""

from venuin.core.observability.tracing import (
    get_tracer,
    instrument_sqlalchemy,
    setup_tracing,
    shutdown_tracing,
)


__all__ = [
    "get_tracer",
    "instrument_sqlalchemy",
    "setup_tracing",
    "shutdown_tracing",
]
