"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class NotificationCreate(BaseModel):
    """Request body used to notify a single user."""

    receiver_id: int = Field(..., gt=0)
    sender_id: int | None = Field(default=None, gt=0)
    order_id: int | None = Field(default=None, gt=0)
    channel: Literal["EMAIL", "SMS", "IN_APP"]
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    tag: str | None = Field(default=None, description="Template tag; derived from the title when omitted")
    payload: dict[str, Any] = Field(default_factory=dict)


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the list of identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationRead(BaseModel):
    """Representation of a persisted notification."""

    id: int
    receiver_id: int
    sender_id: int | None = None
    order_id: int | None = None
    channel: str
    title: str
    message: str
    payload: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None
    sent_at: datetime | None = None


__all__ = ["NotificationCreate", "NotificationMarkReadRequest", "NotificationRead"]
