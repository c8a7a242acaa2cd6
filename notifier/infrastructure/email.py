"""Email channel sender backed by the SendGrid REST API."""

from __future__ import annotations

import json
import logging
from typing import Any

from anyio import to_thread
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notifier.config import Settings
from notifier.domain.entities import SendResult

logger = logging.getLogger(__name__)


def _sendgrid_error_text(body: Any) -> str | None:
    """Flatten a SendGrid error body into one readable line."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if isinstance(body, list):
        return "; ".join(str(item) for item in body) or None
    if not isinstance(body, dict):
        return None

    messages = [
        f"{item['field']}: {item['message']}" if item.get("field") else str(item["message"])
        for item in body.get("errors") or []
        if isinstance(item, dict) and item.get("message")
    ]
    return "; ".join(messages) if messages else json.dumps(body, default=str)


def _describe_failure(status_code: Any, body: Any) -> str:
    details = _sendgrid_error_text(body)
    if status_code and details:
        return f"SendGrid responded with status {status_code}: {details}"
    if status_code:
        return f"SendGrid responded with status {status_code}"
    if details:
        return f"SendGrid request failed: {details}"
    return "SendGrid request failed"


def _is_retryable_status(status_code: Any) -> bool:
    return isinstance(status_code, int) and (status_code == 429 or status_code >= 500)


class SendGridEmailSender:
    """Deliver rendered HTML emails through SendGrid.

    Credentials are fixed at construction; without them every send is
    skipped and reported as unsuccessful.
    """

    def __init__(self, api_key: str | None, sender: str | None) -> None:
        self._api_key = api_key
        self._sender = sender

    @classmethod
    def from_settings(cls, settings: Settings) -> "SendGridEmailSender":
        return cls(settings.sendgrid_api_key, settings.sendgrid_sender)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._sender)

    async def send(self, to: str, subject: str, html: str) -> SendResult:
        return await to_thread.run_sync(self.send_sync, to, subject, html)

    def send_sync(self, to: str, subject: str, html: str) -> SendResult:
        """Send the email on the calling thread."""

        if not self.is_configured:
            logger.info("SendGrid configuration incomplete; skipping email to %s", to)
            return SendResult.failed("Email delivery is not configured")
        if not to:
            return SendResult.failed("Recipient email address is empty")

        message = Mail(
            from_email=self._sender,
            to_emails=to,
            subject=subject,
            html_content=html,
        )

        try:
            client = SendGridAPIClient(self._api_key)
            response = client.send(message)
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            description = _describe_failure(status_code, getattr(exc, "body", None))
            if status_code:
                logger.error("Email to %s failed. %s", to, description)
            else:
                logger.exception("Error sending email to %s via SendGrid", to)
            retryable = status_code is None or _is_retryable_status(status_code)
            return SendResult.failed(description, retryable=retryable)

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            description = _describe_failure(status_code, getattr(response, "body", None))
            logger.error("Email to %s was not accepted. %s", to, description)
            return SendResult.failed(description, retryable=_is_retryable_status(status_code))

        return SendResult.ok()


__all__ = ["SendGridEmailSender"]
