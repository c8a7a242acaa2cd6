"""Helpers that turn marketplace events into single-target notifications."""

from __future__ import annotations

from collections.abc import Sequence

from notifier.domain.entities import CHANNEL_EMAIL, Notification

from .dispatch import NotificationDispatcher
from .templates import EVENT_TEMPLATES

ORDER_STATUS_TAGS = {
    "CONFIRMED": "order_confirmed",
    "PACKED": "order_packed",
    "DISPATCHED": "order_dispatched",
    "PICKED_UP": "order_picked_up",
    "IN_TRANSIT": "order_in_transit",
    "OUT_FOR_DELIVERY": "order_out_for_delivery",
    "DELIVERED": "order_delivered",
    "REJECTED": "order_rejected",
}


def order_status_message(
    status: str,
    order_number: str,
    *,
    tracking_id: str | None = None,
    agent_name: str | None = None,
    reason: str | None = None,
) -> str:
    """Return the customer facing text for an order status change."""

    status = status.upper()
    tracking = f" Tracking ID: {tracking_id}" if tracking_id else ""
    if status == "CONFIRMED":
        return f"Your order #{order_number} has been confirmed and is being processed."
    if status == "PACKED":
        return f"Your order #{order_number} has been packed and is ready for delivery."
    if status == "DISPATCHED":
        parts = [f"Your order #{order_number} has been dispatched."]
        if tracking_id:
            parts.append(f"Tracking ID: {tracking_id}.")
        if agent_name:
            parts.append(f"Delivery agent: {agent_name}")
        return " ".join(parts)
    if status == "PICKED_UP":
        return f"Your order #{order_number} has been picked up by our delivery agent.{tracking}"
    if status == "IN_TRANSIT":
        return f"Your order #{order_number} is now in transit.{tracking}"
    if status == "OUT_FOR_DELIVERY":
        return f"Your order #{order_number} is out for delivery.{tracking}"
    if status == "DELIVERED":
        return f"Your order #{order_number} has been delivered successfully."
    if status == "REJECTED":
        return f"Your order #{order_number} has been rejected. Reason: {reason or 'not specified'}"
    raise ValueError(f"Unknown order status '{status}'")


async def _notify(
    dispatcher: NotificationDispatcher,
    *,
    tag: str,
    receiver_id: int,
    message: str,
    sender_id: int | None = None,
    order_id: int | None = None,
    channel: str = CHANNEL_EMAIL,
    payload: dict | None = None,
) -> Notification:
    return await dispatcher.dispatch(
        receiver_id,
        sender_id,
        order_id,
        channel=channel,
        title=EVENT_TEMPLATES[tag].title,
        message=message,
        tag=tag,
        payload=payload,
    )


async def notify_order_status_changed(
    dispatcher: NotificationDispatcher,
    *,
    customer_id: int,
    order_id: int,
    order_number: str,
    status: str,
    sender_id: int | None = None,
    tracking_id: str | None = None,
    agent_name: str | None = None,
    reason: str | None = None,
    channel: str = CHANNEL_EMAIL,
) -> Notification:
    """Tell a customer that their order moved to ``status``."""

    tag = ORDER_STATUS_TAGS.get(status.upper())
    if tag is None:
        raise ValueError(f"Unknown order status '{status}'")
    message = order_status_message(
        status,
        order_number,
        tracking_id=tracking_id,
        agent_name=agent_name,
        reason=reason,
    )
    return await _notify(
        dispatcher,
        tag=tag,
        receiver_id=customer_id,
        message=message,
        sender_id=sender_id,
        order_id=order_id,
        channel=channel,
        payload={"order_number": order_number, "status": status.upper()},
    )


async def notify_new_order(
    dispatcher: NotificationDispatcher,
    *,
    seller_id: int,
    order_id: int,
    order_number: str,
    payment_type: str,
    customer_id: int | None = None,
) -> Notification:
    payment = payment_type.replace("_", " ").lower()
    return await _notify(
        dispatcher,
        tag="new_order",
        receiver_id=seller_id,
        message=f"You have received a new order #{order_number}. Payment type: {payment}.",
        sender_id=customer_id,
        order_id=order_id,
        payload={"order_number": order_number},
    )


async def notify_payment_submitted(
    dispatcher: NotificationDispatcher, *, seller_id: int, order_id: int, order_number: str
) -> Notification:
    return await _notify(
        dispatcher,
        tag="payment_submitted",
        receiver_id=seller_id,
        message=(
            f"Customer has submitted payment details for order #{order_number}. "
            "Please review and approve."
        ),
        order_id=order_id,
    )


async def notify_payment_reviewed(
    dispatcher: NotificationDispatcher,
    *,
    customer_id: int,
    order_id: int,
    order_number: str,
    approved: bool,
    reason: str | None = None,
    sender_id: int | None = None,
) -> Notification:
    """Tell a customer whether their payment was approved."""

    if approved:
        tag = "payment_approved"
        message = (
            f"Your payment for order #{order_number} has been approved. "
            "Your order will be processed shortly."
        )
    else:
        tag = "payment_rejected"
        detail = f"Reason: {reason}" if reason else "Please contact support for assistance."
        message = f"Your payment for order #{order_number} has been rejected. {detail}"
    return await _notify(
        dispatcher,
        tag=tag,
        receiver_id=customer_id,
        message=message,
        sender_id=sender_id,
        order_id=order_id,
    )


async def notify_application_reviewed(
    dispatcher: NotificationDispatcher, *, applicant_id: int, role: str, approved: bool
) -> Notification:
    role_label = role.replace("_", " ").lower()
    if approved:
        tag = "application_approved"
        message = f"Congratulations! Your application to become a {role_label} has been approved."
    else:
        tag = "application_rejected"
        message = (
            f"Your application to become a {role_label} has been reviewed. "
            "Please check your dashboard for details."
        )
    return await _notify(dispatcher, tag=tag, receiver_id=applicant_id, message=message)


async def notify_sponsorship_reviewed(
    dispatcher: NotificationDispatcher,
    *,
    company_id: int,
    company_name: str,
    seller_id: int,
    seller_name: str,
    approved: bool,
    reviewer_id: int | None = None,
) -> tuple[Notification, Notification]:
    """Tell both sides of a sponsorship proposal how the admin decided.

    The company hears about its proposal first, then the seller.
    """

    if approved:
        company_tag, seller_tag = "sponsorship_approved", "sponsorship_received"
        company_message = f"Your sponsorship proposal for {seller_name} has been approved by the admin."
        seller_message = f"{company_name} has approved a sponsorship partnership with you."
    else:
        company_tag, seller_tag = "sponsorship_rejected", "sponsorship_declined"
        company_message = f"Your sponsorship proposal for {seller_name} has been declined by the admin."
        seller_message = f"The sponsorship proposal from {company_name} has been declined."

    company_notification = await _notify(
        dispatcher,
        tag=company_tag,
        receiver_id=company_id,
        message=company_message,
        sender_id=reviewer_id,
    )
    seller_notification = await _notify(
        dispatcher,
        tag=seller_tag,
        receiver_id=seller_id,
        message=seller_message,
        sender_id=reviewer_id,
    )
    return company_notification, seller_notification


async def notify_review_received(
    dispatcher: NotificationDispatcher, *, seller_id: int, product_name: str, rating: int
) -> Notification:
    return await _notify(
        dispatcher,
        tag="review_received",
        receiver_id=seller_id,
        message=f"You received a {rating}-star review for {product_name}.",
    )


async def notify_delivery_assigned(
    dispatcher: NotificationDispatcher,
    *,
    agent_id: int,
    order_id: int,
    order_number: str,
    customer_name: str,
) -> Notification:
    return await _notify(
        dispatcher,
        tag="delivery_assigned",
        receiver_id=agent_id,
        message=f"You have been assigned to deliver order #{order_number} for {customer_name}.",
        order_id=order_id,
    )


async def notify_comment_approved(
    dispatcher: NotificationDispatcher,
    *,
    author_id: int,
    post_title: str,
    moderator_id: int | None = None,
) -> Notification:
    """Let a commenter know their comment is now public."""

    return await _notify(
        dispatcher,
        tag="comment_approved",
        receiver_id=author_id,
        message=f"Your comment on \"{post_title}\" has been approved and is now visible.",
        sender_id=moderator_id,
        payload={"post_title": post_title},
    )


async def send_weekly_digest(
    dispatcher: NotificationDispatcher,
    *,
    user_id: int,
    highlights: Sequence[str],
) -> Notification:
    """Send one user the summary of the week's marketplace activity."""

    if highlights:
        summary = " ".join(f"• {item}" for item in highlights)
        message = f"Here is what happened on PoultryMarket this week: {summary}"
    else:
        message = "It was a quiet week on PoultryMarket. Check back soon for fresh offers."
    return await _notify(
        dispatcher,
        tag="weekly_digest",
        receiver_id=user_id,
        message=message,
        payload={"highlight_count": len(highlights)},
    )


__all__ = [
    "ORDER_STATUS_TAGS",
    "notify_application_reviewed",
    "notify_comment_approved",
    "notify_delivery_assigned",
    "notify_new_order",
    "notify_order_status_changed",
    "notify_payment_reviewed",
    "notify_payment_submitted",
    "notify_review_received",
    "notify_sponsorship_reviewed",
    "order_status_message",
    "send_weekly_digest",
]
