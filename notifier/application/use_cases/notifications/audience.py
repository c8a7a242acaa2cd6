"""Resolve which users receive a notification."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from notifier.domain.entities import (
    ANNOUNCEMENT_DISCOUNT,
    ANNOUNCEMENT_GENERAL,
    ANNOUNCEMENT_PRODUCT_LAUNCH,
    ANNOUNCEMENT_SALE,
    ANNOUNCEMENT_SLAUGHTER_SCHEDULE,
    ANNOUNCEMENT_URGENT,
    ROLE_ADMIN,
    ROLE_COMPANY,
    ROLE_CUSTOMER,
    ROLE_DELIVERY_AGENT,
    ROLE_SELLER,
    Recipient,
    User,
)

from .errors import ReceiverNotFoundError
from .ports import ALL_ROLES, UserStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_AUDIENCE = 1000

_TYPE_DEFAULT_ROLES: dict[str, tuple[str, ...]] = {
    ANNOUNCEMENT_SALE: (ROLE_CUSTOMER, ROLE_DELIVERY_AGENT),
    ANNOUNCEMENT_DISCOUNT: (ROLE_CUSTOMER,),
    ANNOUNCEMENT_SLAUGHTER_SCHEDULE: (ROLE_CUSTOMER, ROLE_SELLER),
    ANNOUNCEMENT_PRODUCT_LAUNCH: (ROLE_CUSTOMER,),
    ANNOUNCEMENT_GENERAL: (ROLE_CUSTOMER, ROLE_SELLER, ROLE_COMPANY, ROLE_DELIVERY_AGENT),
    ANNOUNCEMENT_URGENT: (
        ROLE_CUSTOMER,
        ROLE_SELLER,
        ROLE_COMPANY,
        ROLE_DELIVERY_AGENT,
        ROLE_ADMIN,
    ),
}


def normalize_role_filter(target_roles: Iterable[str] | None) -> list[str] | None:
    """Return the explicit roles to filter on, or ``None`` for every role.

    ``None`` and any selection containing the ``ALL`` sentinel mean "every
    role". An explicit selection must not be empty.
    """

    if target_roles is None:
        return None

    roles: list[str] = []
    for role in target_roles:
        normalized = str(role).strip().upper()
        if not normalized:
            continue
        if normalized == ALL_ROLES:
            return None
        if normalized not in roles:
            roles.append(normalized)

    if not roles:
        raise ValueError("target_roles must contain at least one role or ALL")
    return roles


def resolve_target_roles(
    announcement_type: str,
    target_roles: Sequence[str] | None = None,
    *,
    is_global: bool = False,
) -> list[str]:
    """Pick the roles an announcement is addressed to.

    Global announcements go to everyone, explicit roles win over the per-type
    defaults, and unknown types reach customers only.
    """

    if is_global:
        return [ALL_ROLES]
    if target_roles:
        return list(target_roles)
    return list(_TYPE_DEFAULT_ROLES.get(announcement_type, (ROLE_CUSTOMER,)))


class AudienceResolver:
    """Compute the verified, capped and actor-free audience of an event."""

    def __init__(self, users: UserStore, *, max_audience: int = DEFAULT_MAX_AUDIENCE) -> None:
        if max_audience <= 0:
            raise ValueError("max_audience must be positive")
        self._users = users
        self._max_audience = max_audience

    @property
    def max_audience(self) -> int:
        return self._max_audience

    async def resolve_receiver(self, receiver_id: int) -> User:
        """Return the single receiver of a point-to-point event."""

        user = await self._users.get_user(receiver_id)
        if user is None:
            raise ReceiverNotFoundError(receiver_id)
        return user

    async def resolve(
        self,
        target_roles: Iterable[str] | None = (ALL_ROLES,),
        *,
        exclude_id: int | None = None,
    ) -> list[Recipient]:
        """Return the ordered broadcast audience.

        Users come back in the store's retrieval order; the list is cut at
        ``max_audience`` entries.
        """

        role_filter = normalize_role_filter(target_roles)
        users = await self._users.find_users(
            role_filter,
            exclude_id,
            verified_only=True,
            limit=self._max_audience,
        )

        recipients: list[Recipient] = []
        for user in users:
            if user.id is None or not user.is_verified:
                continue
            if exclude_id is not None and user.id == exclude_id:
                continue
            if role_filter is not None and not any(user.has_role(role) for role in role_filter):
                continue
            recipients.append(
                Recipient(
                    id=user.id,
                    email=user.email,
                    name=user.name,
                    role=user.role,
                    phone=user.phone,
                )
            )
            if len(recipients) >= self._max_audience:
                break

        logger.info(
            "Resolved audience of %s users for roles %s",
            len(recipients),
            role_filter or ALL_ROLES,
        )
        return recipients


__all__ = [
    "AudienceResolver",
    "DEFAULT_MAX_AUDIENCE",
    "normalize_role_filter",
    "resolve_target_roles",
]
