"""Packages module."""
