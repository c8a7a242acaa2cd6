"""ORM models used by the application infrastructure."""

from .announcement import AnnouncementModel
from .notification import NotificationModel
from .user import UserModel

__all__ = [
    "AnnouncementModel",
    "NotificationModel",
    "UserModel",
]
