"""Endpoints for point-to-point notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notifier.application.use_cases.notifications import (
    NotificationDispatcher,
    ReceiverNotFoundError,
)
from notifier.domain.entities import Notification
from notifier.infrastructure.stores import SqlAlchemyNotificationStore
from notifier.interfaces.api.dependencies import (
    get_notification_dispatcher,
    get_notification_store,
)
from notifier.interfaces.api.schemas import (
    NotificationCreate,
    NotificationMarkReadRequest,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        receiver_id=notification.receiver_id,
        sender_id=notification.sender_id,
        order_id=notification.order_id,
        channel=notification.channel,
        title=notification.title,
        message=notification.message,
        payload=notification.payload or {},
        is_read=notification.is_read,
        created_at=notification.created_at,
        sent_at=notification.sent_at,
    )


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: NotificationCreate,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationRead:
    """Record a notification for one user and attempt its delivery."""

    try:
        notification = await dispatcher.dispatch(
            body.receiver_id,
            body.sender_id,
            body.order_id,
            channel=body.channel,
            title=body.title,
            message=body.message,
            tag=body.tag,
            payload=body.payload,
        )
    except ReceiverNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.get("/users/{user_id}", response_model=list[NotificationRead])
async def list_user_notifications(
    user_id: int,
    limit: int = Query(default=50, ge=1, le=200),
    store: SqlAlchemyNotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    """Return the most recent notifications of ``user_id``."""

    notifications = await store.list_for_user(user_id, limit=limit)
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/users/{user_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notifications_read(
    user_id: int,
    body: NotificationMarkReadRequest,
    store: SqlAlchemyNotificationStore = Depends(get_notification_store),
) -> None:
    await store.mark_as_read(body.unique_ids(), user_id=user_id)
