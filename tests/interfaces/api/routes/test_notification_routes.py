"""API tests for the notification and broadcast endpoints."""

from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from conftest import (
    InMemoryAnnouncementStore,
    InMemoryNotificationStore,
    InMemoryUserStore,
    RecordingEmailSender,
    RecordingSleep,
    RecordingSmsSender,
    make_announcement,
    make_user,
)
from notifier.application.use_cases.notifications import (
    AudienceResolver,
    BroadcastDispatcher,
    NotificationDispatcher,
    TemplateResolver,
)
from notifier.interfaces.api.dependencies import (
    get_announcement_store,
    get_broadcast_dispatcher,
    get_notification_dispatcher,
    get_notification_store,
)
from notifier.main import create_app


class ListingNotificationStore(InMemoryNotificationStore):
    async def list_for_user(self, user_id: int, *, limit: int | None = 50):
        matches = [record for record in reversed(self.records) if record.receiver_id == user_id]
        return matches[:limit] if limit is not None else matches

    async def mark_as_read(self, notification_ids, *, user_id: int) -> int:
        updated = 0
        for position, record in enumerate(self.records):
            if record.id in notification_ids and record.receiver_id == user_id:
                self.records[position] = replace(record, is_read=True)
                updated += 1
        return updated


@pytest.fixture
def services():
    users = InMemoryUserStore(
        [
            make_user(1, role="ADMIN"),
            make_user(2, role="CUSTOMER"),
            make_user(3, role="SELLER"),
            make_user(4, role="DELIVERY_AGENT"),
        ]
    )
    announcements = InMemoryAnnouncementStore(
        [make_announcement(7, type_="SALE", author_id=1, title="Weekend sale")]
    )
    notifications = ListingNotificationStore()
    email_sender = RecordingEmailSender()
    sms_sender = RecordingSmsSender()
    templates = TemplateResolver(announcements)
    return {
        "announcements": announcements,
        "notifications": notifications,
        "email_sender": email_sender,
        "dispatcher": NotificationDispatcher(
            audience=AudienceResolver(users),
            notifications=notifications,
            templates=templates,
            email_sender=email_sender,
            sms_sender=sms_sender,
        ),
        "broadcaster": BroadcastDispatcher(
            announcements=announcements,
            audience=AudienceResolver(users),
            notifications=notifications,
            templates=templates,
            email_sender=email_sender,
            sms_sender=sms_sender,
            sleep=RecordingSleep(),
        ),
    }


@pytest.fixture
def client(services) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_notification_dispatcher] = lambda: services["dispatcher"]
    app.dependency_overrides[get_broadcast_dispatcher] = lambda: services["broadcaster"]
    app.dependency_overrides[get_announcement_store] = lambda: services["announcements"]
    app.dependency_overrides[get_notification_store] = lambda: services["notifications"]
    return TestClient(app)


def test_create_notification_returns_the_record(client: TestClient, services) -> None:
    response = client.post(
        "/notifications/",
        json={
            "receiver_id": 2,
            "sender_id": 3,
            "order_id": 12,
            "channel": "EMAIL",
            "title": "Order Confirmed",
            "message": "Your order #12 has been confirmed.",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["receiver_id"] == 2
    assert body["payload"] == {"tag": "order_confirmed"}
    assert body["is_read"] is False
    assert [to for to, _, _ in services["email_sender"].sent] == ["user2@example.com"]


def test_create_notification_for_unknown_user_returns_404(client: TestClient, services) -> None:
    response = client.post(
        "/notifications/",
        json={"receiver_id": 99, "channel": "IN_APP", "title": "Hi", "message": "There"},
    )

    assert response.status_code == 404
    assert services["notifications"].records == []


def test_create_notification_rejects_unknown_channel(client: TestClient) -> None:
    response = client.post(
        "/notifications/",
        json={"receiver_id": 2, "channel": "FAX", "title": "Hi", "message": "There"},
    )

    assert response.status_code == 422


def test_list_and_mark_notifications_read(client: TestClient) -> None:
    created = client.post(
        "/notifications/",
        json={"receiver_id": 2, "channel": "IN_APP", "title": "Hi", "message": "There"},
    ).json()

    response = client.post("/notifications/users/2/read", json={"ids": [created["id"], created["id"]]})
    listed = client.get("/notifications/users/2")

    assert response.status_code == 204
    assert listed.status_code == 200
    assert [(item["id"], item["is_read"]) for item in listed.json()] == [(created["id"], True)]


def test_broadcast_uses_type_default_roles(client: TestClient, services) -> None:
    response = client.post(
        "/announcements/7/broadcast",
        json={"author_id": 1, "is_global": False},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "total_targeted": 2,
        "success_count": 2,
        "failure_count": 0,
    }
    assert sorted(to for to, _, _ in services["email_sender"].sent) == [
        "user2@example.com",
        "user4@example.com",
    ]


def test_broadcast_with_explicit_roles_reaches_only_those_roles(client: TestClient, services) -> None:
    response = client.post("/announcements/7/broadcast", json={"author_id": 1, "target_roles": ["SELLER"]})

    assert response.status_code == 200
    assert response.json()["total_targeted"] == 1
    assert [to for to, _, _ in services["email_sender"].sent] == ["user3@example.com"]


def test_broadcast_marked_global_reaches_everyone_but_the_author(client: TestClient, services) -> None:
    response = client.post("/announcements/7/broadcast", json={"author_id": 1, "is_global": True})

    assert response.status_code == 200
    assert response.json()["total_targeted"] == 3


def test_broadcast_of_missing_announcement_returns_404(client: TestClient) -> None:
    response = client.post("/announcements/8/broadcast", json={"author_id": 1})

    assert response.status_code == 404


def test_broadcast_with_empty_role_selection_returns_422(client: TestClient) -> None:
    response = client.post(
        "/announcements/7/broadcast",
        json={"author_id": 1, "is_global": False, "target_roles": ["  "]},
    )

    assert response.status_code == 422
