"""Interfaces of the collaborators the dispatchers depend on."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Mapping, Protocol

from notifier.domain.entities import (
    Announcement,
    Notification,
    RenderedContent,
    SendResult,
    User,
)

ALL_ROLES = "ALL"


class UserStore(Protocol):
    async def get_user(self, user_id: int) -> User | None: ...

    async def find_users(
        self,
        role_filter: Sequence[str] | None,
        exclude_id: int | None,
        *,
        verified_only: bool = True,
        limit: int | None = None,
    ) -> Sequence[User]:
        """Return matching users ordered by id; ``None`` means every role."""
        ...


class AnnouncementStore(Protocol):
    async def get_announcement(self, announcement_id: int) -> Announcement | None: ...


class NotificationStore(Protocol):
    async def insert_notification(self, notification: Notification) -> Notification:
        """Persist ``notification`` and return it with its identifier set."""
        ...


class EmailSender(Protocol):
    async def send(self, to: str, subject: str, html: str) -> SendResult: ...


class SmsSender(Protocol):
    async def send(self, phone: str, message: str) -> SendResult: ...


class ContentResolver(Protocol):
    async def resolve(
        self, tag: str | None, channel: str, payload: Mapping[str, Any]
    ) -> RenderedContent: ...


__all__ = [
    "ALL_ROLES",
    "AnnouncementStore",
    "ContentResolver",
    "EmailSender",
    "NotificationStore",
    "SmsSender",
    "UserStore",
]
