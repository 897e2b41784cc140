"""Use cases that move notifications through their delivery states."""

from __future__ import annotations

from typing import Callable
import logging

from sqlalchemy.orm import Session

from app.domain import notification_lifecycle
from app.domain.entities import Notification
from app.domain.errors import NotificationNotFoundError, StoreUnavailableError
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone

from .validators import ensure_text

logger = logging.getLogger(__name__)

# A transition is re-evaluated against fresh state when a concurrent writer wins.
_MAX_ATTEMPTS = 5


def _apply_transition(
    repository: NotificationRepository,
    load: Callable[[], Notification | None],
    transition: Callable[[Notification], Notification],
    notification_id: str,
) -> Notification:
    for _ in range(_MAX_ATTEMPTS):
        current = load()
        if current is None:
            raise NotificationNotFoundError(notification_id)
        updated = transition(current)
        if updated is current:
            return current
        if repository.compare_and_set(current, updated):
            return updated
        logger.debug("Notification %s changed concurrently; retrying", notification_id)
    raise StoreUnavailableError(
        f"Notification {notification_id} kept changing while being updated"
    )


def mark_notification_read(
    session: Session, notification_id: str, *, user_id: int
) -> Notification:
    """Mark the user's notification as read; repeated calls keep the first ``read_at``."""

    repository = NotificationRepository(session)
    now = now_in_app_timezone()
    return _apply_transition(
        repository,
        lambda: repository.get_for_user(notification_id, user_id),
        lambda current: notification_lifecycle.mark_read(current, now=now),
        notification_id,
    )


def mark_all_notifications_read(session: Session, *, user_id: int) -> int:
    """Mark every unread notification of ``user_id`` as read and return how many changed."""

    updated = NotificationRepository(session).mark_all_read(
        user_id, read_at=now_in_app_timezone()
    )
    logger.info("Marked %s notifications as read for user %s", updated, user_id)
    return updated


def mark_notification_sent(session: Session, notification_id: str) -> Notification:
    repository = NotificationRepository(session)
    now = now_in_app_timezone()
    return _apply_transition(
        repository,
        lambda: repository.get(notification_id),
        lambda current: notification_lifecycle.mark_sent(current, now=now),
        notification_id,
    )


def mark_notification_failed(
    session: Session, notification_id: str, *, error_message: str
) -> Notification:
    """Record a failed delivery attempt.

    Once the record has used up ``max_retries`` attempts further failures are
    ignored and the stored record is returned unchanged.
    """

    reason = ensure_text(error_message, "error_message")
    repository = NotificationRepository(session)
    now = now_in_app_timezone()
    result = _apply_transition(
        repository,
        lambda: repository.get(notification_id),
        lambda current: notification_lifecycle.mark_failed(current, reason, now=now),
        notification_id,
    )
    if result.exhausted:
        logger.warning(
            "Notification %s exhausted its %s delivery attempts: %s",
            notification_id,
            result.max_retries,
            result.error_message,
        )
    return result


def requeue_notification(session: Session, notification_id: str) -> Notification:
    """Return a failed notification to ``pending`` while it has attempts left."""

    repository = NotificationRepository(session)
    now = now_in_app_timezone()
    return _apply_transition(
        repository,
        lambda: repository.get(notification_id),
        lambda current: notification_lifecycle.requeue(current, now=now),
        notification_id,
    )


def delete_notification(session: Session, notification_id: str, *, user_id: int) -> None:
    if not NotificationRepository(session).delete_for_user(notification_id, user_id):
        raise NotificationNotFoundError(notification_id)
    logger.info("Deleted notification %s for user %s", notification_id, user_id)


__all__ = [
    "delete_notification",
    "mark_all_notifications_read",
    "mark_notification_failed",
    "mark_notification_read",
    "mark_notification_sent",
    "requeue_notification",
]
