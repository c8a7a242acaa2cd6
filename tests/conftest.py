"""Shared fixtures and in-memory collaborators for the dispatcher tests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

import pytest

from notifier.application.use_cases.notifications import (
    AudienceResolver,
    BroadcastDispatcher,
    NotificationDispatcher,
    TemplateResolver,
)
from notifier.config import DispatchConfig
from notifier.domain.entities import Announcement, Notification, SendResult, User


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class EventLog:
    """Ordered trace of the calls made against the fakes."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, object]] = []

    def add(self, kind: str, value: object) -> None:
        self.entries.append((kind, value))

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.entries]


class InMemoryUserStore:
    def __init__(self, users: Sequence[User] = ()) -> None:
        self.users = list(users)
        self.find_calls: list[dict] = []

    async def get_user(self, user_id: int) -> User | None:
        return next((user for user in self.users if user.id == user_id), None)

    async def find_users(self, role_filter, exclude_id, *, verified_only=True, limit=None):
        self.find_calls.append(
            {"roles": role_filter, "exclude_id": exclude_id, "verified_only": verified_only, "limit": limit}
        )
        matches = [
            user
            for user in sorted(self.users, key=lambda user: user.id)
            if (not verified_only or user.is_verified)
            and (role_filter is None or user.role in role_filter)
            and user.id != exclude_id
        ]
        return matches[:limit] if limit is not None else matches


class InMemoryAnnouncementStore:
    def __init__(self, announcements: Sequence[Announcement] = ()) -> None:
        self.announcements = {announcement.id: announcement for announcement in announcements}
        self.lookups: list[int] = []

    async def get_announcement(self, announcement_id: int) -> Announcement | None:
        self.lookups.append(announcement_id)
        return self.announcements.get(announcement_id)


class InMemoryNotificationStore:
    def __init__(self, log: EventLog | None = None) -> None:
        self.records: list[Notification] = []
        self.fail_for: set[int] = set()
        self.log = log

    async def insert_notification(self, notification: Notification) -> Notification:
        if self.log is not None:
            self.log.add("insert", notification.receiver_id)
        if notification.receiver_id in self.fail_for:
            raise RuntimeError(f"insert failed for user {notification.receiver_id}")
        saved = replace(notification, id=len(self.records) + 1)
        self.records.append(saved)
        return saved

    def channels_for(self, user_id: int) -> list[str]:
        return sorted(record.channel for record in self.records if record.receiver_id == user_id)


class RecordingEmailSender:
    def __init__(self, log: EventLog | None = None) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail_for: set[str] = set()
        self.raise_for: set[str] = set()
        self.log = log

    async def send(self, to: str, subject: str, html: str) -> SendResult:
        if self.log is not None:
            self.log.add("email", to)
        if to in self.raise_for:
            raise ConnectionError(f"SMTP connection refused for {to}")
        if to in self.fail_for:
            return SendResult.failed("mailbox unavailable")
        self.sent.append((to, subject, html))
        return SendResult.ok()


class RecordingSmsSender:
    def __init__(self, result: SendResult | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.result = result or SendResult.ok()

    async def send(self, phone: str, message: str) -> SendResult:
        self.sent.append((phone, message))
        return self.result


class RecordingSleep:
    def __init__(self, log: EventLog | None = None) -> None:
        self.delays: list[float] = []
        self.log = log

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.log is not None:
            self.log.add("sleep", seconds)


def make_user(user_id: int, *, role: str = "CUSTOMER", verified: bool = True,
              phone: str | None = "0712345678") -> User:
    return User(
        id=user_id,
        email=f"user{user_id}@example.com",
        name=f"User {user_id}",
        role=role,
        is_verified=verified,
        phone=phone,
    )


def make_announcement(announcement_id: int = 1, *, type_: str = "GENERAL",
                      author_id: int = 1, title: str = "Market day") -> Announcement:
    return Announcement(
        id=announcement_id,
        title=title,
        content="Fresh broilers arrive every Saturday morning.",
        type=type_,
        author_id=author_id,
    )


@pytest.fixture
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture
def notification_store(event_log: EventLog) -> InMemoryNotificationStore:
    return InMemoryNotificationStore(event_log)


@pytest.fixture
def email_sender(event_log: EventLog) -> RecordingEmailSender:
    return RecordingEmailSender(event_log)


@pytest.fixture
def sms_sender() -> RecordingSmsSender:
    return RecordingSmsSender()


@pytest.fixture
def sleep(event_log: EventLog) -> RecordingSleep:
    return RecordingSleep(event_log)


@pytest.fixture
def build_broadcaster(notification_store, email_sender, sms_sender, sleep):
    """Return a factory producing a broadcaster over the given users and announcements."""

    def factory(users: Sequence[User], announcements: Sequence[Announcement],
                config: DispatchConfig | None = None) -> BroadcastDispatcher:
        config = config or DispatchConfig()
        announcement_store = InMemoryAnnouncementStore(announcements)
        return BroadcastDispatcher(
            announcements=announcement_store,
            audience=AudienceResolver(InMemoryUserStore(users), max_audience=config.max_audience),
            notifications=notification_store,
            templates=TemplateResolver(announcement_store),
            email_sender=email_sender,
            sms_sender=sms_sender,
            config=config,
            sleep=sleep,
        )

    return factory


@pytest.fixture
def build_dispatcher(notification_store, email_sender, sms_sender):
    def factory(users: Sequence[User]) -> NotificationDispatcher:
        return NotificationDispatcher(
            audience=AudienceResolver(InMemoryUserStore(users)),
            notifications=notification_store,
            templates=TemplateResolver(InMemoryAnnouncementStore()),
            email_sender=email_sender,
            sms_sender=sms_sender,
        )

    return factory
