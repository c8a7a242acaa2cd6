"""Fan announcements out to their audience in throttled batches."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Iterable

import anyio

from notifier.config import URGENT_SMS_MODE_SEND, DispatchConfig
from notifier.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_SMS,
    Announcement,
    DispatchResult,
    Notification,
    Recipient,
)
from notifier.utils import Clock, clock_for

from .audience import AudienceResolver
from .errors import AnnouncementNotFoundError
from .ports import (
    ALL_ROLES,
    AnnouncementStore,
    ContentResolver,
    EmailSender,
    NotificationStore,
    SmsSender,
)
from .templates import TAG_ANNOUNCEMENT

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class DispatchBatch:
    """Ordered slice of the audience processed before the next one starts."""

    index: int
    recipients: tuple[Recipient, ...]

    def __len__(self) -> int:
        return len(self.recipients)


def iter_batches(recipients: Sequence[Recipient], size: int) -> Iterator[DispatchBatch]:
    """Yield consecutive batches of at most ``size`` recipients."""

    if size <= 0:
        raise ValueError("Batch size must be positive")
    for index, start in enumerate(range(0, len(recipients), size)):
        yield DispatchBatch(index=index, recipients=tuple(recipients[start : start + size]))


class BroadcastDispatcher:
    """Deliver an announcement to every member of its audience.

    Only a missing announcement or a failing audience query raise; every
    per-recipient problem is logged and counted in the returned
    :class:`DispatchResult`.
    """

    def __init__(
        self,
        *,
        announcements: AnnouncementStore,
        audience: AudienceResolver,
        notifications: NotificationStore,
        templates: ContentResolver,
        email_sender: EmailSender,
        sms_sender: SmsSender,
        config: DispatchConfig | None = None,
        sleep: Sleep = anyio.sleep,
        clock: Clock | None = None,
    ) -> None:
        self._announcements = announcements
        self._audience = audience
        self._notifications = notifications
        self._templates = templates
        self._email_sender = email_sender
        self._sms_sender = sms_sender
        self._config = config or DispatchConfig()
        self._sleep = sleep
        self._now = clock or clock_for(self._config.zone)

    async def broadcast(
        self,
        announcement_id: int,
        author_id: int | None,
        target_roles: Iterable[str] | None = (ALL_ROLES,),
    ) -> DispatchResult:
        announcement = await self._announcements.get_announcement(announcement_id)
        if announcement is None:
            raise AnnouncementNotFoundError(announcement_id)
        return await self.broadcast_announcement(announcement, author_id, target_roles)

    async def broadcast_announcement(
        self,
        announcement: Announcement,
        author_id: int | None,
        target_roles: Iterable[str] | None = (ALL_ROLES,),
    ) -> DispatchResult:
        """Fan out an announcement the caller has already loaded."""

        announcement_id = announcement.id
        recipients = await self._audience.resolve(target_roles, exclude_id=author_id)
        batches = list(iter_batches(recipients, self._config.batch_size))
        logger.info(
            "Broadcasting announcement %s (%s) to %s users in %s batches",
            announcement_id,
            announcement.type,
            len(recipients),
            len(batches),
        )

        success_count = 0
        failure_count = 0
        for batch in batches:
            if batch.index > 0:
                await self._sleep(self._config.batch_delay_seconds)
            delivered, failed = await self._process_batch(batch, announcement, author_id)
            success_count += delivered
            failure_count += failed
            logger.info(
                "Batch %s/%s of announcement %s done: %s delivered, %s failed",
                batch.index + 1,
                len(batches),
                announcement_id,
                delivered,
                failed,
            )

        return DispatchResult(
            success=True,
            total_targeted=len(recipients),
            success_count=success_count,
            failure_count=failure_count,
        )

    async def _process_batch(
        self, batch: DispatchBatch, announcement: Announcement, author_id: int | None
    ) -> tuple[int, int]:
        outcomes: list[bool] = []
        limiter = anyio.CapacityLimiter(self._config.concurrency)

        async def settle(recipient: Recipient) -> None:
            async with limiter:
                try:
                    delivered = await self._deliver(recipient, announcement, author_id)
                except Exception:
                    logger.exception(
                        "Delivering announcement %s to user %s failed",
                        announcement.id,
                        recipient.id,
                    )
                    delivered = False
            outcomes.append(delivered)

        async with anyio.create_task_group() as task_group:
            for recipient in batch.recipients:
                task_group.start_soon(settle, recipient)

        delivered_count = sum(1 for outcome in outcomes if outcome)
        return delivered_count, len(outcomes) - delivered_count

    async def _deliver(
        self, recipient: Recipient, announcement: Announcement, author_id: int | None
    ) -> bool:
        record_payload = {
            "tag": TAG_ANNOUNCEMENT,
            "announcement_id": announcement.id,
            "announcement_type": announcement.type,
        }
        await self._persist(recipient, announcement, author_id, CHANNEL_EMAIL, record_payload)

        send_sms_inline = announcement.is_urgent and self._config.urgent_sms_mode == URGENT_SMS_MODE_SEND
        if announcement.is_urgent:
            await self._persist(
                recipient,
                announcement,
                author_id,
                CHANNEL_SMS,
                {**record_payload, "delivery": "sent" if send_sms_inline else "queued"},
            )

        render_payload = {**record_payload, "announcement": announcement, "name": recipient.name}
        email = await self._templates.resolve(TAG_ANNOUNCEMENT, CHANNEL_EMAIL, render_payload)
        result = await self._email_sender.send(recipient.email, email.subject, email.body)
        delivered = result.success
        if not result.success:
            logger.warning(
                "Announcement %s email to user %s failed: %s",
                announcement.id,
                recipient.id,
                result.error,
            )

        if send_sms_inline:
            if not recipient.phone:
                logger.info("User %s has no phone number; skipping urgent SMS", recipient.id)
            else:
                sms = await self._templates.resolve(TAG_ANNOUNCEMENT, CHANNEL_SMS, render_payload)
                sms_result = await self._sms_sender.send(recipient.phone, sms.body)
                if not sms_result.success:
                    logger.warning(
                        "Announcement %s SMS to user %s failed: %s",
                        announcement.id,
                        recipient.id,
                        sms_result.error,
                    )
                    delivered = False

        return delivered

    async def _persist(
        self,
        recipient: Recipient,
        announcement: Announcement,
        author_id: int | None,
        channel: str,
        payload: dict,
    ) -> Notification:
        now = self._now()
        return await self._notifications.insert_notification(
            Notification(
                id=None,
                receiver_id=recipient.id,
                sender_id=author_id,
                channel=channel,
                title=announcement.title,
                message=announcement.content,
                payload=payload,
                is_read=False,
                created_at=now,
                sent_at=now,
            )
        )


__all__ = ["BroadcastDispatcher", "DispatchBatch", "iter_batches"]
