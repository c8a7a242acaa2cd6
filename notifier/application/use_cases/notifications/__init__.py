"""Public helpers for dispatching notifications."""

from .audience import AudienceResolver, normalize_role_filter, resolve_target_roles
from .broadcast import BroadcastDispatcher, DispatchBatch, iter_batches
from .dispatch import NotificationDispatcher
from .errors import (
    AnnouncementNotFoundError,
    NotificationDispatchError,
    ReceiverNotFoundError,
)
from .events import (
    notify_application_reviewed,
    notify_comment_approved,
    notify_delivery_assigned,
    notify_new_order,
    notify_order_status_changed,
    notify_payment_reviewed,
    notify_payment_submitted,
    notify_review_received,
    notify_sponsorship_reviewed,
    send_weekly_digest,
)
from .ports import ALL_ROLES
from .templates import TAG_ANNOUNCEMENT, TAG_GENERIC, TemplateResolver, tag_for_title

__all__ = [
    "ALL_ROLES",
    "AnnouncementNotFoundError",
    "AudienceResolver",
    "BroadcastDispatcher",
    "DispatchBatch",
    "NotificationDispatchError",
    "NotificationDispatcher",
    "ReceiverNotFoundError",
    "TAG_ANNOUNCEMENT",
    "TAG_GENERIC",
    "TemplateResolver",
    "iter_batches",
    "normalize_role_filter",
    "notify_application_reviewed",
    "notify_comment_approved",
    "notify_delivery_assigned",
    "notify_new_order",
    "notify_order_status_changed",
    "notify_payment_reviewed",
    "notify_payment_submitted",
    "notify_review_received",
    "notify_sponsorship_reviewed",
    "resolve_target_roles",
    "send_weekly_digest",
    "tag_for_title",
]
