"""Status state machine for notifications.

Every function takes the current record and returns the next one without
touching storage. A transition that changes nothing returns the very same
object, which callers use to detect idempotent no-ops::

    pending --mark_sent--> sent --mark_read--> read
    pending --mark_failed--> failed --requeue--> pending
    failed  --mark_failed--> failed            (until retries are exhausted)
    *       --mark_read--> read
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from app.domain.entities import Notification, NotificationStatus
from app.domain.errors import InvalidNotificationTransitionError


def mark_sent(notification: Notification, *, now: datetime) -> Notification:
    if notification.status in (NotificationStatus.SENT, NotificationStatus.READ):
        return notification
    if notification.status is not NotificationStatus.PENDING:
        raise InvalidNotificationTransitionError(
            f"Cannot mark a {notification.status.value} notification as sent"
        )
    return replace(
        notification, status=NotificationStatus.SENT, sent_at=now, updated_at=now
    )


def mark_read(notification: Notification, *, now: datetime) -> Notification:
    if notification.status is NotificationStatus.READ:
        return notification
    return replace(
        notification, status=NotificationStatus.READ, read_at=now, updated_at=now
    )


def mark_failed(
    notification: Notification, error_message: str, *, now: datetime
) -> Notification:
    """Record a failed delivery attempt.

    ``retry_count`` never grows past ``max_retries``; a failure reported for an
    exhausted record is ignored.
    """

    if notification.status not in (NotificationStatus.PENDING, NotificationStatus.FAILED):
        raise InvalidNotificationTransitionError(
            f"Cannot mark a {notification.status.value} notification as failed"
        )
    if is_retry_exhausted(notification):
        return notification
    return replace(
        notification,
        status=NotificationStatus.FAILED,
        retry_count=min(notification.retry_count + 1, notification.max_retries),
        error_message=error_message,
        updated_at=now,
    )


def requeue(notification: Notification, *, now: datetime) -> Notification:
    """Move a failed record back to ``pending`` so it is picked up again."""

    if notification.status is NotificationStatus.PENDING:
        return notification
    if notification.status is not NotificationStatus.FAILED:
        raise InvalidNotificationTransitionError(
            f"Cannot retry a {notification.status.value} notification"
        )
    if is_retry_exhausted(notification):
        raise InvalidNotificationTransitionError(
            "Notification has exhausted its delivery attempts"
        )
    return replace(
        notification,
        status=NotificationStatus.PENDING,
        scheduled_for=now,
        updated_at=now,
    )


def is_retry_exhausted(notification: Notification) -> bool:
    return notification.exhausted


__all__ = [
    "is_retry_exhausted",
    "mark_failed",
    "mark_read",
    "mark_sent",
    "requeue",
]
