"""Aggregate application use cases."""

from .notifications import BroadcastDispatcher, NotificationDispatcher

__all__ = [
    "BroadcastDispatcher",
    "NotificationDispatcher",
]
