"""Compose and decode TCP message frames from typed field templates."""

__version__ = "0.1.0"
