"""Utility helpers for reusable functionality."""

from .datetime import (
    DEFAULT_TIMEZONE,
    Clock,
    clock_for,
    localize,
    resolve_timezone,
    to_naive_local,
)

__all__ = [
    "Clock",
    "DEFAULT_TIMEZONE",
    "clock_for",
    "localize",
    "resolve_timezone",
    "to_naive_local",
]
