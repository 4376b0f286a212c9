"""Glamora backend: mobile API and admin moderation dashboard API."""

__version__ = "1.0.0"
