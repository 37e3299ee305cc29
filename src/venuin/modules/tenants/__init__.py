"""Tenants module: tenant records and super admin tenant operations."""
