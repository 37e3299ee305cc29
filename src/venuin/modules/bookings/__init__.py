"""Bookings module."""
