"""Utility script to broadcast an existing announcement from the command line."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from functools import partial

import anyio
from sqlalchemy.exc import SQLAlchemyError

from notifier.application.use_cases.notifications import (
    ALL_ROLES,
    AnnouncementNotFoundError,
    AudienceResolver,
    BroadcastDispatcher,
    TemplateResolver,
)
from notifier.config import DispatchConfig, get_settings
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


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the broadcast."""

    parser = argparse.ArgumentParser(
        description="Send an announcement to every verified user of the selected roles.",
    )
    parser.add_argument("announcement_id", type=int, help="Identifier of the announcement")
    parser.add_argument(
        "--author-id",
        type=int,
        default=None,
        help="User that published the announcement; never included in the audience",
    )
    parser.add_argument(
        "--roles",
        nargs="+",
        default=[ALL_ROLES],
        help="Roles that receive the announcement (default: ALL)",
    )
    parser.add_argument(
        "--urgent-sms-mode",
        choices=("queue", "send"),
        default=None,
        help="Override URGENT_SMS_MODE for this run",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Broadcast the announcement selected on the command line."""

    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = get_settings()
    config = DispatchConfig.from_settings(settings)
    if args.urgent_sms_mode:
        config = replace(config, urgent_sms_mode=args.urgent_sms_mode)

    engine = create_database_engine(settings)
    initialize_database(engine)
    session_factory = create_session_factory(engine)
    announcements = SqlAlchemyAnnouncementStore(session_factory, zone=config.zone)

    dispatcher = BroadcastDispatcher(
        announcements=announcements,
        audience=AudienceResolver(
            SqlAlchemyUserStore(session_factory), max_audience=config.max_audience
        ),
        notifications=SqlAlchemyNotificationStore(session_factory, zone=config.zone),
        templates=TemplateResolver(announcements, base_url=config.base_url),
        email_sender=SendGridEmailSender.from_settings(settings),
        sms_sender=HttpSmsSender.from_settings(settings),
        config=config,
    )

    try:
        result = anyio.run(
            partial(dispatcher.broadcast, args.announcement_id, args.author_id, args.roles)
        )
    except AnnouncementNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
    except ValueError as exc:
        raise SystemExit(f"Invalid audience: {exc}") from exc
    except SQLAlchemyError as exc:
        raise SystemExit(f"Database error while broadcasting: {exc}") from exc
    finally:
        engine.dispose()

    print(
        "Broadcast finished:\n"
        f"  Targeted: {result.total_targeted}\n"
        f"  Delivered: {result.success_count}\n"
        f"  Failed: {result.failure_count}"
    )


if __name__ == "__main__":
    main()
