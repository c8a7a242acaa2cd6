"""SMS channel sender for the Kenyan bulk SMS gateway."""

from __future__ import annotations

import logging
import re
from typing import Any, Final

import anyio
import httpx

from notifier.config import Settings
from notifier.domain.entities import SendResult

logger = logging.getLogger(__name__)

KENYAN_MSISDN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(254|0|\+254)[17]\d{8}$")
MAX_SMS_LENGTH: Final[int] = 640
DEFAULT_SMS_TIMEOUT_SECONDS: Final[float] = 10.0

_WHITESPACE = re.compile(r"\s+")


def is_valid_kenyan_phone(phone: str | None) -> bool:
    """Return ``True`` when ``phone`` is a Kenyan mobile number."""

    if not phone:
        return False
    return KENYAN_MSISDN_PATTERN.match(phone.strip()) is not None


def normalize_kenyan_phone(phone: str) -> str:
    """Return ``phone`` in the ``2547XXXXXXXX`` form expected by the gateway."""

    candidate = phone.strip()
    match = KENYAN_MSISDN_PATTERN.match(candidate)
    if match is None:
        raise ValueError(f"Invalid Kenyan phone number format: {phone}")
    return "254" + candidate[len(match.group(1)):]


def format_sms_message(message: str) -> str:
    """Collapse whitespace and cap the text at four SMS parts."""

    cleaned = _WHITESPACE.sub(" ", message or "").strip()
    if len(cleaned) > MAX_SMS_LENGTH:
        return cleaned[: MAX_SMS_LENGTH - 3] + "..."
    return cleaned


def _is_accepted(result: Any) -> bool:
    if not isinstance(result, dict):
        return False
    if result.get("success") is True or result.get("status") == "success":
        return True
    if str(result.get("responseCode", "")) == "200":
        return True
    responses = result.get("responses")
    if isinstance(responses, list) and responses:
        first = responses[0]
        if isinstance(first, dict):
            code = first.get("response-code", first.get("respose-code"))
            return str(code) == "200"
    return False


def _error_from(result: Any) -> str:
    if isinstance(result, dict):
        for key in ("message", "error", "response-description"):
            if result.get(key):
                return str(result[key])
        responses = result.get("responses")
        if isinstance(responses, list) and responses and isinstance(responses[0], dict):
            description = responses[0].get("response-description")
            if description:
                return str(description)
    return "Unknown SMS API error"


class HttpSmsSender:
    """Send SMS messages through the gateway's JSON endpoint.

    Numbers that are not Kenyan mobile numbers are rejected before any request
    is made. Every request is bounded by a hard timeout.
    """

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str | None,
        partner_id: str | None,
        sender_id: str = "PoultryMarket",
        timeout_seconds: float = DEFAULT_SMS_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._partner_id = partner_id
        self._sender_id = sender_id
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpSmsSender":
        return cls(
            api_url=settings.sms_api_url,
            api_key=settings.sms_api_key,
            partner_id=settings.sms_partner_id,
            sender_id=settings.sms_sender_id,
            timeout_seconds=settings.sms_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._partner_id)

    async def send(self, phone: str, message: str) -> SendResult:
        if not is_valid_kenyan_phone(phone):
            logger.warning("Rejected SMS to invalid phone number %r", phone)
            return SendResult.failed(f"Invalid Kenyan phone number format: {phone}")

        if not self.is_configured:
            logger.info("SMS gateway configuration incomplete; skipping SMS to %s", phone)
            return SendResult.failed("SMS delivery is not configured")

        mobile = normalize_kenyan_phone(phone)
        request_body = {
            "apikey": self._api_key,
            "partnerID": self._partner_id,
            "message": format_sms_message(message),
            "shortcode": self._sender_id,
            "mobile": mobile,
        }

        try:
            with anyio.fail_after(self._timeout_seconds):
                async with httpx.AsyncClient(
                    timeout=self._timeout_seconds, transport=self._transport
                ) as client:
                    response = await client.post(
                        self._api_url,
                        json=request_body,
                        headers={"Accept": "application/json", "User-Agent": "PoultryMarket/1.0"},
                    )
        except (TimeoutError, httpx.TimeoutException):
            logger.error("SMS request to %s timed out after %s seconds", mobile, self._timeout_seconds)
            return SendResult.failed(
                f"Request timeout after {self._timeout_seconds:g} seconds", retryable=True
            )
        except httpx.HTTPError as exc:
            logger.error("SMS request to %s failed: %s", mobile, exc)
            return SendResult.failed(str(exc) or exc.__class__.__name__, retryable=True)

        if response.status_code == 429 or response.status_code >= 500:
            logger.error("SMS API responded with status %s for %s", response.status_code, mobile)
            return SendResult.failed(
                f"SMS API responded with status {response.status_code}", retryable=True
            )
        if not response.is_success:
            logger.error("SMS API responded with status %s for %s", response.status_code, mobile)
            return SendResult.failed(f"SMS API responded with status {response.status_code}")

        try:
            result = response.json()
        except ValueError:
            logger.error("SMS API returned a non JSON body for %s", mobile)
            return SendResult.failed("SMS API returned an unreadable response")

        if _is_accepted(result):
            logger.info("SMS sent to %s", mobile)
            return SendResult.ok()

        error = _error_from(result)
        logger.error("SMS to %s was rejected: %s", mobile, error)
        return SendResult.failed(error)


__all__ = [
    "HttpSmsSender",
    "KENYAN_MSISDN_PATTERN",
    "format_sms_message",
    "is_valid_kenyan_phone",
    "normalize_kenyan_phone",
]
