"""Collect discussion topics and rank them from most to least interesting."""

__version__ = "0.1.0"
