"""Laundry Girl: door to door dry clean service web API."""

__version__ = "1.0.0"
