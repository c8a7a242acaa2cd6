"""Point-to-point notification delivery."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from notifier.config import DispatchConfig
from notifier.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_SMS,
    NOTIFICATION_CHANNELS,
    Notification,
    SendResult,
    User,
)
from notifier.utils import Clock, clock_for

from .audience import AudienceResolver
from .ports import ContentResolver, EmailSender, NotificationStore, SmsSender
from .templates import tag_for_title

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Record a notification for one receiver and attempt its channel send.

    A returned :class:`Notification` means the event was recorded. Channel
    failures are logged and never undo the record.
    """

    def __init__(
        self,
        *,
        audience: AudienceResolver,
        notifications: NotificationStore,
        templates: ContentResolver,
        email_sender: EmailSender,
        sms_sender: SmsSender,
        config: DispatchConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._audience = audience
        self._notifications = notifications
        self._templates = templates
        self._email_sender = email_sender
        self._sms_sender = sms_sender
        self._now = clock or clock_for((config or DispatchConfig()).zone)

    async def dispatch(
        self,
        receiver_id: int,
        sender_id: int | None = None,
        order_id: int | None = None,
        *,
        channel: str,
        title: str,
        message: str,
        tag: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Notification:
        if channel not in NOTIFICATION_CHANNELS:
            raise ValueError(f"Unsupported notification channel '{channel}'")

        receiver = await self._audience.resolve_receiver(receiver_id)
        event_tag = tag or tag_for_title(title)
        record_payload = {"tag": event_tag, **(payload or {})}

        now = self._now()
        saved = await self._notifications.insert_notification(
            Notification(
                id=None,
                receiver_id=receiver_id,
                sender_id=sender_id,
                order_id=order_id,
                channel=channel,
                title=title,
                message=message,
                payload=record_payload,
                is_read=False,
                created_at=now,
                sent_at=now,
            )
        )

        try:
            result = await self._send(receiver, channel, event_tag, title, message, record_payload)
        except Exception:
            logger.exception(
                "Sending %s notification %s to user %s failed", channel, saved.id, receiver_id
            )
        else:
            if result is not None and not result.success:
                logger.warning(
                    "%s notification %s to user %s was not delivered: %s",
                    channel,
                    saved.id,
                    receiver_id,
                    result.error,
                )
        return saved

    async def _send(
        self,
        receiver: User,
        channel: str,
        tag: str,
        title: str,
        message: str,
        payload: Mapping[str, Any],
    ) -> SendResult | None:
        if channel == CHANNEL_EMAIL:
            content = await self._templates.resolve(
                tag, channel, {**payload, "name": receiver.name, "title": title, "message": message}
            )
            return await self._email_sender.send(receiver.email, content.subject, content.body)

        if channel == CHANNEL_SMS:
            if not receiver.phone:
                logger.info("User %s has no phone number; skipping SMS", receiver.id)
                return None
            content = await self._templates.resolve(
                tag, channel, {**payload, "name": receiver.name, "title": title, "message": message}
            )
            return await self._sms_sender.send(receiver.phone, content.body)

        return None


__all__ = ["NotificationDispatcher"]
