"""Venuin tenancy core: tenant isolation, context propagation and permission gating."""

__version__ = "0.1.0"
