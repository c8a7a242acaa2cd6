"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

CHANNEL_EMAIL = "EMAIL"
CHANNEL_SMS = "SMS"
CHANNEL_IN_APP = "IN_APP"

NOTIFICATION_CHANNELS = (CHANNEL_EMAIL, CHANNEL_SMS, CHANNEL_IN_APP)


@dataclass
class Notification:
    """Record of one event addressed to one receiver over one channel.

    ``sent_at`` marks the moment delivery was attempted; it says nothing about
    whether the channel accepted the message.
    """

    id: int | None
    receiver_id: int
    channel: str
    title: str
    message: str
    sender_id: int | None = None
    order_id: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None
    sent_at: datetime | None = None


__all__ = [
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_SMS",
    "NOTIFICATION_CHANNELS",
    "Notification",
]
