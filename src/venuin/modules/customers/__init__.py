"""Customers module."""
