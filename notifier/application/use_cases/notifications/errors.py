"""Errors raised by the notification dispatchers."""


class NotificationDispatchError(Exception):
    """Base class for structural failures that abort a dispatch."""


class ReceiverNotFoundError(NotificationDispatchError, LookupError):
    """Raised when the receiver of a single-target notification does not exist."""

    def __init__(self, receiver_id: int) -> None:
        super().__init__(f"User with id {receiver_id} not found")
        self.receiver_id = receiver_id


class AnnouncementNotFoundError(NotificationDispatchError, LookupError):
    """Raised when a broadcast references an unknown announcement."""

    def __init__(self, announcement_id: int) -> None:
        super().__init__(f"Announcement with id {announcement_id} not found")
        self.announcement_id = announcement_id


__all__ = [
    "AnnouncementNotFoundError",
    "NotificationDispatchError",
    "ReceiverNotFoundError",
]
