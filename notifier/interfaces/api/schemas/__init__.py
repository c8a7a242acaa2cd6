"""Pydantic schemas for the API layer."""

from .announcement import BroadcastRequest, DispatchResultRead
from .notification import NotificationCreate, NotificationMarkReadRequest, NotificationRead

__all__ = [
    "BroadcastRequest",
    "DispatchResultRead",
    "NotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationRead",
]
