"""Audited super admin elevation into a tenant."""

from venuin.core.elevation.service import ElevatedSession, ElevationService


__all__ = [
    "ElevatedSession",
    "ElevationService",
]
