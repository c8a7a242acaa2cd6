"""Domain entities exposed by the application."""

from .announcement import (
    ANNOUNCEMENT_DISCOUNT,
    ANNOUNCEMENT_EVENT,
    ANNOUNCEMENT_GENERAL,
    ANNOUNCEMENT_PRODUCT_LAUNCH,
    ANNOUNCEMENT_PROMOTION,
    ANNOUNCEMENT_SALE,
    ANNOUNCEMENT_SLAUGHTER_SCHEDULE,
    ANNOUNCEMENT_TYPES,
    ANNOUNCEMENT_URGENT,
    Announcement,
)
from .dispatch import DispatchResult, Recipient, RenderedContent, SendResult
from .notification import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SMS,
    NOTIFICATION_CHANNELS,
    Notification,
)
from .user import (
    ROLE_ADMIN,
    ROLE_COMPANY,
    ROLE_CUSTOMER,
    ROLE_DELIVERY_AGENT,
    ROLE_SELLER,
    USER_ROLES,
    User,
)

__all__ = [
    "ANNOUNCEMENT_DISCOUNT",
    "ANNOUNCEMENT_EVENT",
    "ANNOUNCEMENT_GENERAL",
    "ANNOUNCEMENT_PRODUCT_LAUNCH",
    "ANNOUNCEMENT_PROMOTION",
    "ANNOUNCEMENT_SALE",
    "ANNOUNCEMENT_SLAUGHTER_SCHEDULE",
    "ANNOUNCEMENT_TYPES",
    "ANNOUNCEMENT_URGENT",
    "Announcement",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_SMS",
    "NOTIFICATION_CHANNELS",
    "Notification",
    "DispatchResult",
    "Recipient",
    "RenderedContent",
    "SendResult",
    "ROLE_ADMIN",
    "ROLE_COMPANY",
    "ROLE_CUSTOMER",
    "ROLE_DELIVERY_AGENT",
    "ROLE_SELLER",
    "USER_ROLES",
    "User",
]
