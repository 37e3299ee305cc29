"""Users module."""
