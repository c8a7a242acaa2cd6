"""Repository implementations for infrastructure layer."""

from .announcement_repository import AnnouncementRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "AnnouncementRepository",
    "NotificationRepository",
    "UserRepository",
]
