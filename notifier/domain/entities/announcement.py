"""Domain entity representing an announcement published to the marketplace."""

from dataclasses import dataclass
from datetime import datetime

ANNOUNCEMENT_GENERAL = "GENERAL"
ANNOUNCEMENT_URGENT = "URGENT"
ANNOUNCEMENT_EVENT = "EVENT"
ANNOUNCEMENT_PROMOTION = "PROMOTION"
ANNOUNCEMENT_SALE = "SALE"
ANNOUNCEMENT_PRODUCT_LAUNCH = "PRODUCT_LAUNCH"
ANNOUNCEMENT_DISCOUNT = "DISCOUNT"
ANNOUNCEMENT_SLAUGHTER_SCHEDULE = "SLAUGHTER_SCHEDULE"

ANNOUNCEMENT_TYPES = (
    ANNOUNCEMENT_GENERAL,
    ANNOUNCEMENT_URGENT,
    ANNOUNCEMENT_EVENT,
    ANNOUNCEMENT_PROMOTION,
    ANNOUNCEMENT_SALE,
    ANNOUNCEMENT_PRODUCT_LAUNCH,
    ANNOUNCEMENT_DISCOUNT,
    ANNOUNCEMENT_SLAUGHTER_SCHEDULE,
)


@dataclass
class Announcement:
    """Message authored once and fanned out to many users."""

    id: int | None
    title: str
    content: str
    type: str
    author_id: int
    created_at: datetime | None = None

    @property
    def is_urgent(self) -> bool:
        return self.type == ANNOUNCEMENT_URGENT


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
]
