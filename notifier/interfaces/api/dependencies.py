"""FastAPI dependency utilities."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from notifier.application.use_cases.notifications import (
    AudienceResolver,
    BroadcastDispatcher,
    NotificationDispatcher,
    TemplateResolver,
)
from notifier.config import DispatchConfig, Settings, get_settings
from notifier.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from notifier.infrastructure.email import SendGridEmailSender
from notifier.infrastructure.sms import HttpSmsSender
from notifier.infrastructure.stores import (
    SqlAlchemyAnnouncementStore,
    SqlAlchemyNotificationStore,
    SqlAlchemyUserStore,
)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    """Create the engine once, make sure the schema exists and return a session factory."""

    engine = create_database_engine(get_settings())
    initialize_database(engine)
    return create_session_factory(engine)


def get_dispatch_config(settings: Settings = Depends(get_settings)) -> DispatchConfig:
    return DispatchConfig.from_settings(settings)


def get_user_store() -> SqlAlchemyUserStore:
    return SqlAlchemyUserStore(get_session_factory())


def get_announcement_store(
    config: DispatchConfig = Depends(get_dispatch_config),
) -> SqlAlchemyAnnouncementStore:
    return SqlAlchemyAnnouncementStore(get_session_factory(), zone=config.zone)


def get_notification_store(
    config: DispatchConfig = Depends(get_dispatch_config),
) -> SqlAlchemyNotificationStore:
    return SqlAlchemyNotificationStore(get_session_factory(), zone=config.zone)


def get_email_sender(settings: Settings = Depends(get_settings)) -> SendGridEmailSender:
    return SendGridEmailSender.from_settings(settings)


def get_sms_sender(settings: Settings = Depends(get_settings)) -> HttpSmsSender:
    return HttpSmsSender.from_settings(settings)


def get_notification_dispatcher(
    users: SqlAlchemyUserStore = Depends(get_user_store),
    announcements: SqlAlchemyAnnouncementStore = Depends(get_announcement_store),
    notifications: SqlAlchemyNotificationStore = Depends(get_notification_store),
    email_sender: SendGridEmailSender = Depends(get_email_sender),
    sms_sender: HttpSmsSender = Depends(get_sms_sender),
    config: DispatchConfig = Depends(get_dispatch_config),
) -> NotificationDispatcher:
    return NotificationDispatcher(
        audience=AudienceResolver(users, max_audience=config.max_audience),
        notifications=notifications,
        templates=TemplateResolver(announcements, base_url=config.base_url),
        email_sender=email_sender,
        sms_sender=sms_sender,
        config=config,
    )


def get_broadcast_dispatcher(
    users: SqlAlchemyUserStore = Depends(get_user_store),
    announcements: SqlAlchemyAnnouncementStore = Depends(get_announcement_store),
    notifications: SqlAlchemyNotificationStore = Depends(get_notification_store),
    email_sender: SendGridEmailSender = Depends(get_email_sender),
    sms_sender: HttpSmsSender = Depends(get_sms_sender),
    config: DispatchConfig = Depends(get_dispatch_config),
) -> BroadcastDispatcher:
    return BroadcastDispatcher(
        announcements=announcements,
        audience=AudienceResolver(users, max_audience=config.max_audience),
        notifications=notifications,
        templates=TemplateResolver(announcements, base_url=config.base_url),
        email_sender=email_sender,
        sms_sender=sms_sender,
        config=config,
    )


__all__ = [
    "get_announcement_store",
    "get_broadcast_dispatcher",
    "get_dispatch_config",
    "get_email_sender",
    "get_notification_dispatcher",
    "get_notification_store",
    "get_session_factory",
    "get_sms_sender",
    "get_user_store",
]
