"""Unit tests for the SendGrid email sender."""

from __future__ import annotations

import json
import types

import pytest

from notifier.config import Settings
from notifier.infrastructure import email as email_module
from notifier.infrastructure.email import SendGridEmailSender


class _StubSendGridAPIClient:
    """Client stand-in that accepts every message."""

    sent: list = []

    def __init__(self, api_key: str):
        self.api_key = api_key

    def send(self, message):
        self.sent.append(message)
        return types.SimpleNamespace(status_code=202, body=None)


def test_send_without_configuration_is_skipped(monkeypatch: pytest.MonkeyPatch) -> None:
    """Missing SendGrid credentials must not attempt any request."""

    def _fail(*_args, **_kwargs):
        raise AssertionError("SendGrid client must not be created")

    monkeypatch.setattr(email_module, "SendGridAPIClient", _fail)

    result = SendGridEmailSender(None, None).send_sync("user@example.com", "Subject", "<p>Body</p>")

    assert result.success is False
    assert result.error == "Email delivery is not configured"


def test_send_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """A 2xx SendGrid response is a successful send."""

    monkeypatch.setattr(email_module, "SendGridAPIClient", _StubSendGridAPIClient)

    sender = SendGridEmailSender("SG.fake", "sender@example.com")
    result = sender.send_sync("user@example.com", "Subject", "<p>Body</p>")

    assert result.success is True
    assert result.error is None


def test_send_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    """Forbidden responses from SendGrid should surface meaningful log details."""

    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {"errors": [{"message": "The provided authorization grant is invalid.", "field": None}]}
        ).encode()

    class FailingClient(_StubSendGridAPIClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        result = SendGridEmailSender("SG.fake", "sender@example.com").send_sync(
            "user@example.com", "Subject", "<p>Body</p>"
        )

    assert result.success is False
    assert result.retryable is False
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_unsuccessful_response_is_retryable_on_rate_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    class RateLimitedClient(_StubSendGridAPIClient):
        def send(self, message):
            return types.SimpleNamespace(status_code=429, body=b'{"errors": [{"message": "Too many requests"}]}')

    monkeypatch.setattr(email_module, "SendGridAPIClient", RateLimitedClient)

    result = SendGridEmailSender("SG.fake", "sender@example.com").send_sync(
        "user@example.com", "Subject", "<p>Body</p>"
    )

    assert result.success is False
    assert result.retryable is True
    assert result.error == "SendGrid responded with status 429: Too many requests"


@pytest.mark.anyio
async def test_async_send_runs_the_client(monkeypatch: pytest.MonkeyPatch) -> None:
    _StubSendGridAPIClient.sent = []
    monkeypatch.setattr(email_module, "SendGridAPIClient", _StubSendGridAPIClient)

    result = await SendGridEmailSender("SG.fake", "sender@example.com").send(
        "user@example.com", "Subject", "<p>Body</p>"
    )

    assert result.success is True
    assert len(_StubSendGridAPIClient.sent) == 1


def test_from_settings_uses_injected_credentials() -> None:
    settings = Settings(sendgrid_api_key="SG.key", sendgrid_sender="noreply@poultry.example")

    sender = SendGridEmailSender.from_settings(settings)

    assert sender.is_configured is True


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (None, None),
        (b"", None),
        ("plain text", "plain text"),
        ({"errors": [{"message": "bad", "field": "from"}]}, "from: bad"),
        (["a", "b"], "a; b"),
    ],
)
def test_sendgrid_error_text(body, expected) -> None:
    assert email_module._sendgrid_error_text(body) == expected
