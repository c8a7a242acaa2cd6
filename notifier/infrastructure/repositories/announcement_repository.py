"""Persistence helpers for announcement entities."""

from __future__ import annotations

from datetime import datetime, tzinfo

from sqlalchemy.orm import Session

from notifier.domain.entities import Announcement
from notifier.infrastructure.models import AnnouncementModel
from notifier.utils import localize, resolve_timezone, to_naive_local


class AnnouncementRepository:
    """Read and create :class:`Announcement` objects.

    Timestamps are stored as wall-clock time in ``zone``.
    """

    def __init__(self, session: Session, zone: tzinfo | None = None) -> None:
        self.session = session
        self.zone = zone or resolve_timezone()

    def get(self, announcement_id: int) -> Announcement | None:
        model = self.session.get(AnnouncementModel, announcement_id)
        return self._to_entity(model) if model else None

    def create(self, announcement: Announcement) -> Announcement:
        model = AnnouncementModel(
            title=announcement.title,
            content=announcement.content,
            type=announcement.type,
            author_id=announcement.author_id,
            created_at=to_naive_local(announcement.created_at or datetime.now(self.zone), self.zone),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: AnnouncementModel) -> Announcement:
        return Announcement(
            id=model.id,
            title=model.title,
            content=model.content,
            type=model.type,
            author_id=model.author_id,
            created_at=localize(model.created_at, self.zone),
        )


__all__ = ["AnnouncementRepository"]
