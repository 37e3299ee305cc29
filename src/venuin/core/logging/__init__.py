"""Logging module with structured logging and request tracking."""

from venuin.core.logging.middleware import RequestContextMiddleware, attribution, get_client_ip


__all__ = [
    "RequestContextMiddleware",
    "attribution",
    "get_client_ip",
]
