"""Preference-filtered creation of notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import logging
from typing import Any

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationChannel,
    NotificationPriority,
    NotificationStatus,
)
from app.domain.errors import StoreUnavailableError, UserNotFoundError
from app.infrastructure.repositories import NotificationRepository, UserRepository
from app.utils import now_in_app_timezone

from .validators import (
    MAX_TITLE_LENGTH,
    coerce_enum,
    ensure_data,
    ensure_max_retries,
    ensure_text,
    ensure_user_id,
)

logger = logging.getLogger(__name__)


class DispatchStatus(str, Enum):
    CREATED = "created"
    SUPPRESSED = "suppressed"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a dispatch request."""

    status: DispatchStatus
    notification: Notification | None = None

    @property
    def created(self) -> bool:
        return self.status is DispatchStatus.CREATED

    @property
    def notification_id(self) -> str | None:
        return self.notification.id if self.notification else None


def build_notification(
    *,
    user_id: Any,
    channel: Any,
    category: Any,
    title: str | None,
    message: str | None,
    priority: Any = NotificationPriority.NORMAL,
    data: dict[str, Any] | None = None,
    scheduled_for: datetime | None = None,
    max_retries: int | None = None,
    settings: Settings | None = None,
) -> Notification:
    """Validate the inputs and return an unsaved ``pending`` notification."""

    if max_retries is None:
        max_retries = (settings or get_settings()).notification_max_retries
    now = now_in_app_timezone()
    return Notification(
        id=None,
        user_id=ensure_user_id(user_id),
        channel=coerce_enum(NotificationChannel, channel, "channel"),
        category=coerce_enum(NotificationCategory, category, "category"),
        title=ensure_text(title, "title", max_length=MAX_TITLE_LENGTH),
        message=ensure_text(message, "message"),
        data=ensure_data(data),
        status=NotificationStatus.PENDING,
        priority=coerce_enum(
            NotificationPriority, priority or NotificationPriority.NORMAL, "priority"
        ),
        scheduled_for=scheduled_for or now,
        retry_count=0,
        max_retries=ensure_max_retries(max_retries),
        created_at=now,
        updated_at=now,
    )


def _dispatch_session(session: Session) -> Session:
    """Return a separate session on the caller's engine.

    Dispatch commits and rolls back on its own, so the caller's pending
    changes are neither persisted nor discarded by it.
    """

    return Session(bind=session.get_bind(), autoflush=False)


def dispatch_notification(
    session: Session,
    *,
    user_id: int,
    channel: NotificationChannel | str,
    category: NotificationCategory | str,
    title: str,
    message: str,
    priority: NotificationPriority | str = NotificationPriority.NORMAL,
    data: dict[str, Any] | None = None,
    settings: Settings | None = None,
) -> DispatchResult:
    """Create a notification for ``user_id`` unless their preferences opt out.

    Validation problems and unknown users are raised to the caller. Store
    failures are logged and reported as :attr:`DispatchStatus.FAILED` so the
    workflow that triggered the notification is never interrupted by it.
    """

    notification = build_notification(
        user_id=user_id,
        channel=channel,
        category=category,
        title=title,
        message=message,
        priority=priority,
        data=data,
        settings=settings,
    )

    try:
        with _dispatch_session(session) as dispatch_session:
            preferences = UserRepository(dispatch_session).get_preferences(
                notification.user_id
            )
            if preferences is None:
                raise UserNotFoundError(notification.user_id)

            if not preferences.is_enabled(notification.channel, notification.category):
                logger.debug(
                    "Suppressed %s/%s notification for user %s",
                    notification.channel.value,
                    notification.category.value,
                    notification.user_id,
                )
                return DispatchResult(status=DispatchStatus.SUPPRESSED)

            saved = NotificationRepository(dispatch_session).create(notification)
    except StoreUnavailableError:
        logger.exception(
            "Could not dispatch %s notification for user %s",
            notification.category.value,
            notification.user_id,
        )
        return DispatchResult(status=DispatchStatus.FAILED)

    logger.info(
        "Created %s/%s notification %s for user %s",
        saved.channel.value,
        saved.category.value,
        saved.id,
        saved.user_id,
    )
    return DispatchResult(status=DispatchStatus.CREATED, notification=saved)


def create_notification(
    session: Session,
    *,
    user_id: int,
    channel: NotificationChannel | str,
    category: NotificationCategory | str,
    title: str,
    message: str,
    priority: NotificationPriority | str = NotificationPriority.NORMAL,
    data: dict[str, Any] | None = None,
    scheduled_for: datetime | None = None,
    max_retries: int | None = None,
    settings: Settings | None = None,
) -> Notification:
    """Persist a notification without consulting the user's preferences."""

    notification = build_notification(
        user_id=user_id,
        channel=channel,
        category=category,
        title=title,
        message=message,
        priority=priority,
        data=data,
        scheduled_for=scheduled_for,
        max_retries=max_retries,
        settings=settings,
    )
    if UserRepository(session).get(notification.user_id) is None:
        raise UserNotFoundError(notification.user_id)
    return NotificationRepository(session).create(notification)


__all__ = [
    "DispatchResult",
    "DispatchStatus",
    "build_notification",
    "create_notification",
    "dispatch_notification",
]
