"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, tzinfo
from typing import Iterable

from sqlalchemy.orm import Session

from notifier.domain.entities import Notification
from notifier.infrastructure.models import NotificationModel
from notifier.utils import localize, resolve_timezone, to_naive_local


class NotificationRepository:
    """Provide persistence operations for :class:`Notification` objects."""

    def __init__(self, session: Session, zone: tzinfo | None = None) -> None:
        self.session = session
        self.zone = zone or resolve_timezone()

    def list_for_user(
        self,
        user_id: int,
        *,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.receiver_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(
        self, user_id: int, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.receiver_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.receiver_id == user_id,
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def _apply_entity_to_model(self, model: NotificationModel, notification: Notification) -> None:
        model.created_at = to_naive_local(notification.created_at or datetime.now(self.zone), self.zone)
        model.receiver_id = notification.receiver_id
        model.sender_id = notification.sender_id
        model.order_id = notification.order_id
        model.channel = notification.channel
        model.title = notification.title
        model.message = notification.message
        model.payload = notification.payload or {}
        model.is_read = notification.is_read
        model.sent_at = to_naive_local(notification.sent_at, self.zone)

    def _to_entity(self, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            receiver_id=model.receiver_id,
            sender_id=model.sender_id,
            order_id=model.order_id,
            channel=model.channel,
            title=model.title,
            message=model.message,
            payload=model.payload or {},
            is_read=bool(model.is_read),
            created_at=localize(model.created_at, self.zone),
            sent_at=localize(model.sent_at, self.zone),
        )


__all__ = ["NotificationRepository"]
