"""Timezone helpers shared by the dispatchers and the repositories.

Nothing here reads configuration: callers resolve the marketplace timezone
once (``resolve_timezone``) and pass it along.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Callable, Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE: Final[str] = "Africa/Nairobi"

Clock = Callable[[], datetime]


def resolve_timezone(name: str | None = None) -> tzinfo:
    """Return the IANA zone called ``name``; blank names mean Nairobi.

    Unknown names raise ``ValueError``.
    """

    tz_name = (name or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone '{tz_name}'") from exc


def clock_for(tz: tzinfo) -> Clock:
    """Return a callable producing the current aware time in ``tz``."""

    def now() -> datetime:
        return datetime.now(tz=tz)

    return now


def localize(value: datetime | None, tz: tzinfo) -> datetime | None:
    """Express ``value`` in ``tz``; naive values are read as already local."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_naive_local(value: datetime | None, tz: tzinfo) -> datetime | None:
    # DateTime columns carry no zone, so rows hold local wall-clock time.
    localized = localize(value, tz)
    return localized.replace(tzinfo=None) if localized is not None else None


__all__ = [
    "Clock",
    "DEFAULT_TIMEZONE",
    "clock_for",
    "localize",
    "resolve_timezone",
    "to_naive_local",
]
