"""Map notification events to channel specific content."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Any, Final, Mapping

from notifier.domain.entities import (
    ANNOUNCEMENT_DISCOUNT,
    ANNOUNCEMENT_EVENT,
    ANNOUNCEMENT_GENERAL,
    ANNOUNCEMENT_PRODUCT_LAUNCH,
    ANNOUNCEMENT_PROMOTION,
    ANNOUNCEMENT_SALE,
    ANNOUNCEMENT_SLAUGHTER_SCHEDULE,
    ANNOUNCEMENT_URGENT,
    CHANNEL_EMAIL,
    CHANNEL_SMS,
    Announcement,
    RenderedContent,
)

from .ports import AnnouncementStore

logger = logging.getLogger(__name__)

BRAND_NAME: Final[str] = "PoultryMarket"
TAG_GENERIC: Final[str] = "generic"
TAG_ANNOUNCEMENT: Final[str] = "announcement"
SMS_PREVIEW_LENGTH: Final[int] = 160


@dataclass(frozen=True)
class EventTemplate:
    """Presentation attributes of a known event tag."""

    title: str
    icon: str
    color: str
    action_label: str
    action_path: str


@dataclass(frozen=True)
class AnnouncementStyle:
    icon: str
    color: str
    label: str
    description: str


EVENT_TEMPLATES: dict[str, EventTemplate] = {
    "order_confirmed": EventTemplate("Order Confirmed", "✅", "#10b981", "Track Your Order", "/orders"),
    "new_order": EventTemplate("New Order Received", "🛒", "#2563eb", "View Order", "/seller/orders"),
    "payment_submitted": EventTemplate("Payment Submitted for Approval", "💳", "#f59e0b", "Review Payment", "/seller/orders"),
    "payment_approved": EventTemplate("Payment Approved", "💰", "#10b981", "View Order", "/orders"),
    "payment_rejected": EventTemplate("Payment Rejected", "⚠️", "#dc2626", "Contact Support", "/contact"),
    "order_packed": EventTemplate("Order Packed", "📦", "#8b5cf6", "Track Your Order", "/orders"),
    "order_dispatched": EventTemplate("Order Dispatched", "🚚", "#2563eb", "Track Your Order", "/orders"),
    "order_picked_up": EventTemplate("Order Picked Up", "🛵", "#0ea5e9", "Track Your Order", "/orders"),
    "order_in_transit": EventTemplate("Order In Transit", "🛣️", "#0ea5e9", "Track Your Order", "/orders"),
    "order_out_for_delivery": EventTemplate("Order Out for Delivery", "📍", "#f97316", "Track Your Order", "/orders"),
    "order_delivered": EventTemplate("Order Delivered", "🎉", "#10b981", "Rate Your Experience", "/orders"),
    "order_rejected": EventTemplate("Order Rejected", "❌", "#dc2626", "Browse Products", "/products"),
    "application_approved": EventTemplate("Application Approved", "🎊", "#10b981", "Open Dashboard", "/dashboard"),
    "application_rejected": EventTemplate("Application Update", "📋", "#6b7280", "Open Dashboard", "/dashboard"),
    "sponsorship_approved": EventTemplate("Sponsorship Approved", "🤝", "#10b981", "View Sponsorships", "/company/sponsorships"),
    "sponsorship_rejected": EventTemplate("Sponsorship Declined", "📄", "#6b7280", "View Sponsorships", "/company/sponsorships"),
    "sponsorship_received": EventTemplate("New Sponsorship Offer", "🌟", "#8b5cf6", "View Offer", "/seller/sponsorships"),
    "sponsorship_declined": EventTemplate("Sponsorship Declined", "📄", "#6b7280", "View Sponsorships", "/seller/sponsorships"),
    "review_received": EventTemplate("New Review Received", "⭐", "#f59e0b", "View Reviews", "/seller/reviews"),
    "delivery_assigned": EventTemplate("New Delivery Assignment", "🚴", "#2563eb", "View Deliveries", "/delivery/dashboard"),
    "comment_approved": EventTemplate("Comment Approved", "💬", "#10b981", "View Comment", "/blog"),
    "weekly_digest": EventTemplate("Your Weekly Digest", "🗞️", "#059669", "Visit PoultryMarket", "/"),
}

ANNOUNCEMENT_STYLES: dict[str, AnnouncementStyle] = {
    ANNOUNCEMENT_GENERAL: AnnouncementStyle("📢", "#2563eb", "Announcement", "News from the PoultryMarket community."),
    ANNOUNCEMENT_URGENT: AnnouncementStyle("🚨", "#dc2626", "Urgent Notice", "Important information that needs your immediate attention."),
    ANNOUNCEMENT_EVENT: AnnouncementStyle("📅", "#7c3aed", "Upcoming Event", "An event you will not want to miss."),
    ANNOUNCEMENT_PROMOTION: AnnouncementStyle("🎯", "#db2777", "Promotion", "A special promotion picked for you."),
    ANNOUNCEMENT_SALE: AnnouncementStyle("🏷️", "#ea580c", "Sale", "Great prices on fresh farm products for a limited time."),
    ANNOUNCEMENT_PRODUCT_LAUNCH: AnnouncementStyle("🚀", "#0891b2", "New Product", "Something new just arrived on the marketplace."),
    ANNOUNCEMENT_DISCOUNT: AnnouncementStyle("💸", "#16a34a", "Discount", "Save more on your next order."),
    ANNOUNCEMENT_SLAUGHTER_SCHEDULE: AnnouncementStyle("🗓️", "#92400e", "Slaughter Schedule", "Plan your orders around the upcoming slaughter dates."),
}

_TITLE_TO_TAG: dict[str, str] = {
    template.title.casefold(): tag for tag, template in EVENT_TEMPLATES.items()
}
_TITLE_TO_TAG["order update"] = "order_rejected"

_WHITESPACE = re.compile(r"\s+")


def tag_for_title(title: str | None) -> str:
    """Return the template tag matching a notification title."""

    if not title:
        return TAG_GENERIC
    return _TITLE_TO_TAG.get(title.strip().casefold(), TAG_GENERIC)


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return _WHITESPACE.sub(" ", str(value)).strip() or default


def _email_shell(*, heading: str, icon: str, color: str, body_html: str, base_url: str,
                 action_label: str, action_path: str) -> str:
    link = f"{base_url.rstrip('/')}{action_path}"
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(heading)} - {BRAND_NAME}</title></head>"
        "<body style=\"margin:0;padding:0;font-family:Arial,sans-serif;background-color:#f3f4f6;\">"
        "<div style=\"max-width:600px;margin:0 auto;background-color:white;border-radius:8px;overflow:hidden;\">"
        f"<div style=\"background-color:{color};padding:32px 20px;text-align:center;\">"
        f"<h1 style=\"color:white;margin:0;font-size:26px;\">{icon} {escape(heading)}</h1></div>"
        f"<div style=\"padding:32px 20px;color:#374151;line-height:1.6;\">{body_html}"
        "<div style=\"text-align:center;margin:30px 0;\">"
        f"<a href=\"{escape(link, quote=True)}\" style=\"display:inline-block;background-color:{color};"
        "color:white;padding:12px 24px;text-decoration:none;border-radius:6px;font-weight:bold;\">"
        f"{escape(action_label)}</a></div></div>"
        "<div style=\"padding:20px;text-align:center;color:#9ca3af;font-size:12px;\">"
        f"&copy; {datetime.now().year} {BRAND_NAME}. All rights reserved.</div>"
        "</div></body></html>"
    )


def render_event(template: EventTemplate, channel: str, payload: Mapping[str, Any],
                 base_url: str) -> RenderedContent:
    name = _text(payload.get("name"), "there")
    title = _text(payload.get("title"), template.title)
    message = _text(payload.get("message"))

    if channel == CHANNEL_EMAIL:
        body = (
            f"<p>Hi {escape(name)},</p>"
            f"<p>{escape(message)}</p>"
        )
        html = _email_shell(
            heading=title,
            icon=template.icon,
            color=template.color,
            body_html=body,
            base_url=base_url,
            action_label=template.action_label,
            action_path=template.action_path,
        )
        return RenderedContent(subject=f"{title} - {BRAND_NAME}", body=html)

    if channel == CHANNEL_SMS:
        return RenderedContent(subject=title, body=f"{template.icon} {title}: {message}".strip())

    return RenderedContent(subject=title, body=message)


def render_generic(channel: str, payload: Mapping[str, Any], base_url: str) -> RenderedContent:
    """Render the catch-all template used for unknown tags and failed lookups."""

    fallback = EventTemplate(
        title=_text(payload.get("title"), "Notification"),
        icon="🔔",
        color="#059669",
        action_label="Open PoultryMarket",
        action_path="/",
    )
    return render_event(fallback, channel, payload, base_url)


def render_announcement(announcement: Announcement, channel: str, payload: Mapping[str, Any],
                        base_url: str) -> RenderedContent:
    style = ANNOUNCEMENT_STYLES.get(announcement.type, ANNOUNCEMENT_STYLES[ANNOUNCEMENT_GENERAL])
    name = _text(payload.get("name"), "there")
    title = _text(announcement.title, style.label)
    content = _text(announcement.content)

    if channel == CHANNEL_EMAIL:
        body = (
            f"<p>Hi {escape(name)},</p>"
            f"<p style=\"color:{style.color};font-weight:bold;\">{escape(style.label)}: "
            f"{escape(style.description)}</p>"
            f"<h2 style=\"margin:0 0 12px 0;\">{escape(title)}</h2>"
            f"<p>{escape(content)}</p>"
        )
        html = _email_shell(
            heading=style.label,
            icon=style.icon,
            color=style.color,
            body_html=body,
            base_url=base_url,
            action_label="Read the Announcement",
            action_path="/announcements",
        )
        return RenderedContent(subject=f"{style.icon} {title} - {BRAND_NAME}", body=html)

    if channel == CHANNEL_SMS:
        preview = content
        if len(preview) > SMS_PREVIEW_LENGTH:
            preview = preview[: SMS_PREVIEW_LENGTH - 3].rstrip() + "..."
        return RenderedContent(
            subject=title,
            body=f"{style.icon} {style.label} from {BRAND_NAME}: {title}. {preview}".strip(),
        )

    return RenderedContent(subject=title, body=content)



class TemplateResolver:
    """Resolve rendered content for a tag and channel.

    Unknown tags, missing announcements and lookup errors all degrade to the
    generic template; :meth:`resolve` never raises.
    """

    def __init__(
        self,
        announcements: AnnouncementStore | None = None,
        *,
        base_url: str = "http://localhost:3000",
    ) -> None:
        self._announcements = announcements
        self._base_url = base_url

    async def resolve(
        self, tag: str | None, channel: str, payload: Mapping[str, Any]
    ) -> RenderedContent:
        payload = payload or {}
        try:
            if tag == TAG_ANNOUNCEMENT:
                announcement = await self._lookup_announcement(payload)
                if announcement is not None:
                    return render_announcement(announcement, channel, payload, self._base_url)
                logger.warning(
                    "Announcement for payload %s not found; using generic template",
                    {key: payload.get(key) for key in ("announcement_id", "title")},
                )
            else:
                template = EVENT_TEMPLATES.get(tag or "")
                if template is not None:
                    return render_event(template, channel, payload, self._base_url)
        except Exception:
            logger.exception("Rendering template '%s' for %s failed", tag, channel)

        return render_generic(channel, payload, self._base_url)

    async def _lookup_announcement(self, payload: Mapping[str, Any]) -> Announcement | None:
        announcement = payload.get("announcement")
        if isinstance(announcement, Announcement):
            return announcement

        announcement_id = payload.get("announcement_id")
        if announcement_id is None or self._announcements is None:
            return None
        try:
            return await self._announcements.get_announcement(int(announcement_id))
        except Exception:
            logger.exception("Looking up announcement %s failed", announcement_id)
            return None


__all__ = [
    "ANNOUNCEMENT_STYLES",
    "EVENT_TEMPLATES",
    "TAG_ANNOUNCEMENT",
    "TAG_GENERIC",
    "TemplateResolver",
    "render_announcement",
    "render_event",
    "render_generic",
    "tag_for_title",
]
