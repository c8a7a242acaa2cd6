"""Async store adapters over the SQLAlchemy repositories.

Each call opens its own short-lived session on a worker thread so that the
concurrent per-recipient operations of a broadcast never share a session.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo
from typing import Callable, TypeVar

from anyio import to_thread
from sqlalchemy.orm import Session, sessionmaker

from notifier.domain.entities import Announcement, Notification, User
from notifier.infrastructure.repositories import (
    AnnouncementRepository,
    NotificationRepository,
    UserRepository,
)
from notifier.utils import resolve_timezone

T = TypeVar("T")


class _SessionStore:
    def __init__(
        self, session_factory: sessionmaker[Session], *, zone: tzinfo | None = None
    ) -> None:
        self._session_factory = session_factory
        self._zone = zone or resolve_timezone()

    async def _run(self, operation: Callable[[Session], T]) -> T:
        def work() -> T:
            with self._session_factory() as session:
                return operation(session)

        return await to_thread.run_sync(work)


class SqlAlchemyUserStore(_SessionStore):
    async def get_user(self, user_id: int) -> User | None:
        return await self._run(lambda session: UserRepository(session).get(user_id))

    async def find_users(
        self,
        role_filter: Sequence[str] | None,
        exclude_id: int | None,
        *,
        verified_only: bool = True,
        limit: int | None = None,
    ) -> Sequence[User]:
        return await self._run(
            lambda session: UserRepository(session).find(
                role_filter,
                exclude_id=exclude_id,
                verified_only=verified_only,
                limit=limit,
            )
        )


class SqlAlchemyAnnouncementStore(_SessionStore):
    async def get_announcement(self, announcement_id: int) -> Announcement | None:
        return await self._run(
            lambda session: AnnouncementRepository(session, self._zone).get(announcement_id)
        )


class SqlAlchemyNotificationStore(_SessionStore):
    async def insert_notification(self, notification: Notification) -> Notification:
        return await self._run(
            lambda session: NotificationRepository(session, self._zone).create(notification)
        )

    async def list_for_user(self, user_id: int, *, limit: int | None = 50) -> Sequence[Notification]:
        return await self._run(
            lambda session: NotificationRepository(session, self._zone).list_for_user(user_id, limit=limit)
        )

    async def mark_as_read(self, notification_ids: Sequence[int], *, user_id: int) -> int:
        return await self._run(
            lambda session: NotificationRepository(session, self._zone).mark_as_read(
                notification_ids, user_id=user_id
            )
        )


__all__ = [
    "SqlAlchemyAnnouncementStore",
    "SqlAlchemyNotificationStore",
    "SqlAlchemyUserStore",
]
