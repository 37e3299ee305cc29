"""Venues module."""
