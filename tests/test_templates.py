"""Tests for the template resolver and channel routing."""

from __future__ import annotations

import pytest

from conftest import InMemoryAnnouncementStore, make_announcement
from notifier.application.use_cases.notifications import (
    TAG_ANNOUNCEMENT,
    TAG_GENERIC,
    TemplateResolver,
    tag_for_title,
)

pytestmark = pytest.mark.anyio


@pytest.mark.parametrize(
    ("title", "tag"),
    [
        ("Order Confirmed", "order_confirmed"),
        ("  order delivered ", "order_delivered"),
        ("Comment Approved", "comment_approved"),
        ("Something else entirely", TAG_GENERIC),
        ("", TAG_GENERIC),
        (None, TAG_GENERIC),
    ],
)
def test_tag_for_title(title, tag) -> None:
    assert tag_for_title(title) == tag


async def test_known_tag_renders_rich_email() -> None:
    resolver = TemplateResolver(base_url="https://market.example")

    content = await resolver.resolve(
        "order_packed",
        "EMAIL",
        {"name": "Wanjiru", "message": "Your order #42 has been packed."},
    )

    assert content.subject == "Order Packed - PoultryMarket"
    assert "<html>" in content.body
    assert "Wanjiru" in content.body
    assert "Your order #42 has been packed." in content.body
    assert "https://market.example/orders" in content.body


async def test_sms_content_is_plain_text() -> None:
    resolver = TemplateResolver()

    content = await resolver.resolve("order_delivered", "SMS", {"message": "Delivered!"})

    assert "<" not in content.body
    assert content.body.endswith("Order Delivered: Delivered!")


async def test_unknown_tag_falls_back_to_generic_template() -> None:
    resolver = TemplateResolver()

    content = await resolver.resolve("no_such_tag", "EMAIL", {"title": "Heads up", "message": "Hello"})

    assert content.subject == "Heads up - PoultryMarket"
    assert "🔔" in content.body


async def test_user_supplied_text_is_escaped_in_email() -> None:
    resolver = TemplateResolver()

    content = await resolver.resolve(TAG_GENERIC, "EMAIL", {"message": "<script>x</script>"})

    assert "<script>" not in content.body
    assert "&lt;script&gt;" in content.body


async def test_announcement_is_looked_up_by_id() -> None:
    store = InMemoryAnnouncementStore([make_announcement(7, type_="SLAUGHTER_SCHEDULE")])
    resolver = TemplateResolver(store)

    content = await resolver.resolve(TAG_ANNOUNCEMENT, "EMAIL", {"announcement_id": 7, "name": "Otieno"})

    assert store.lookups == [7]
    assert "Slaughter Schedule" in content.body
    assert "Market day" in content.body


async def test_announcement_entity_in_payload_skips_lookup() -> None:
    store = InMemoryAnnouncementStore()
    resolver = TemplateResolver(store)

    content = await resolver.resolve(
        TAG_ANNOUNCEMENT, "SMS", {"announcement": make_announcement(type_="URGENT")}
    )

    assert store.lookups == []
    assert content.body.startswith("🚨 Urgent Notice from PoultryMarket: Market day.")


async def test_missing_announcement_falls_back_to_generic() -> None:
    resolver = TemplateResolver(InMemoryAnnouncementStore())

    content = await resolver.resolve(TAG_ANNOUNCEMENT, "EMAIL", {"announcement_id": 3, "title": "News"})

    assert content.subject == "News - PoultryMarket"


async def test_announcement_lookup_error_never_escapes() -> None:
    class BrokenStore:
        async def get_announcement(self, announcement_id):
            raise RuntimeError("database is down")

    resolver = TemplateResolver(BrokenStore())

    content = await resolver.resolve(TAG_ANNOUNCEMENT, "SMS", {"announcement_id": 1, "message": "fallback"})

    assert "fallback" in content.body


async def test_announcement_without_id_uses_generic_template() -> None:
    store = InMemoryAnnouncementStore([make_announcement(1, title="Same title")])
    resolver = TemplateResolver(store)

    content = await resolver.resolve(TAG_ANNOUNCEMENT, "IN_APP", {"title": "Same title", "message": "m"})

    assert store.lookups == []
    assert content.subject == "Same title"
    assert content.body == "m"
