"""Endpoints that fan announcements out to users."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from notifier.application.use_cases.notifications import (
    BroadcastDispatcher,
    resolve_target_roles,
)
from notifier.infrastructure.stores import SqlAlchemyAnnouncementStore
from notifier.interfaces.api.dependencies import (
    get_announcement_store,
    get_broadcast_dispatcher,
)
from notifier.interfaces.api.schemas import BroadcastRequest, DispatchResultRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.post("/{announcement_id}/broadcast", response_model=DispatchResultRead)
async def broadcast_announcement(
    announcement_id: int,
    body: BroadcastRequest,
    announcements: SqlAlchemyAnnouncementStore = Depends(get_announcement_store),
    dispatcher: BroadcastDispatcher = Depends(get_broadcast_dispatcher),
) -> DispatchResultRead:
    """Deliver an announcement to its audience and report the aggregate outcome."""

    announcement = await announcements.get_announcement(announcement_id)
    if announcement is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Announcement with id {announcement_id} not found",
        )

    roles = resolve_target_roles(
        announcement.type, body.target_roles, is_global=body.is_global
    )
    try:
        result = await dispatcher.broadcast_announcement(announcement, body.author_id, roles)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    logger.info("Announcement %s broadcast finished: %s", announcement_id, result)
    return DispatchResultRead(
        success=result.success,
        total_targeted=result.total_targeted,
        success_count=result.success_count,
        failure_count=result.failure_count,
    )
