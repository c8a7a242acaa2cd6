"""Application configuration settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notifier.utils.datetime import DEFAULT_TIMEZONE, resolve_timezone

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

URGENT_SMS_MODE_QUEUE = "queue"
URGENT_SMS_MODE_SEND = "send"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifier.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default=DEFAULT_TIMEZONE,
        description="IANA timezone used for notification timestamps",
    )
    base_url: str = Field(
        default="http://localhost:3000",
        description="Public URL of the marketplace used to build links inside messages",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    sms_api_url: str = Field(
        default="https://sms.textsms.co.ke/api/services/sendsms/",
        description="Endpoint of the bulk SMS gateway",
    )
    sms_api_key: str | None = Field(default=None, description="SMS gateway API key")
    sms_partner_id: str | None = Field(default=None, description="SMS gateway partner id")
    sms_sender_id: str = Field(
        default="PoultryMarket", description="Short code shown as the SMS sender"
    )
    sms_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Hard timeout applied to every SMS request"
    )
    broadcast_batch_size: int = Field(
        default=50, gt=0, description="Number of recipients processed per batch"
    )
    broadcast_batch_delay_seconds: float = Field(
        default=1.0, ge=0, description="Pause between two consecutive batches"
    )
    broadcast_max_audience: int = Field(
        default=1000, gt=0, description="Hard cap on the number of broadcast recipients"
    )
    broadcast_concurrency: int = Field(
        default=10, gt=0, description="Maximum in-flight recipients inside one batch"
    )
    urgent_sms_mode: Literal["queue", "send"] = Field(
        default=URGENT_SMS_MODE_QUEUE,
        description=(
            "How URGENT announcements handle SMS: 'queue' only records the SMS "
            "notification for an external worker, 'send' transmits it inline"
        ),
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@dataclass(frozen=True)
class DispatchConfig:
    """Tuning values injected into the dispatchers at construction time."""

    batch_size: int = 50
    batch_delay_seconds: float = 1.0
    max_audience: int = 1000
    concurrency: int = 10
    urgent_sms_mode: str = URGENT_SMS_MODE_QUEUE
    base_url: str = "http://localhost:3000"
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        resolve_timezone(self.timezone)
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.max_audience <= 0:
            raise ValueError("max_audience must be positive")
        if self.concurrency <= 0:
            raise ValueError("concurrency must be positive")
        if self.batch_delay_seconds < 0:
            raise ValueError("batch_delay_seconds cannot be negative")
        if self.urgent_sms_mode not in (URGENT_SMS_MODE_QUEUE, URGENT_SMS_MODE_SEND):
            raise ValueError(f"Unknown urgent_sms_mode '{self.urgent_sms_mode}'")

    @classmethod
    def from_settings(cls, settings: Settings) -> "DispatchConfig":
        return cls(
            batch_size=settings.broadcast_batch_size,
            batch_delay_seconds=settings.broadcast_batch_delay_seconds,
            max_audience=settings.broadcast_max_audience,
            concurrency=settings.broadcast_concurrency,
            urgent_sms_mode=settings.urgent_sms_mode,
            base_url=settings.base_url,
            timezone=settings.app_timezone,
        )

    @property
    def zone(self) -> tzinfo:
        return resolve_timezone(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "DispatchConfig",
    "Settings",
    "URGENT_SMS_MODE_QUEUE",
    "URGENT_SMS_MODE_SEND",
    "get_settings",
    "reset_settings_cache",
]
