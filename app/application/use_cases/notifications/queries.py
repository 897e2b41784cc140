"""Read-side queries over a user's notifications."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.domain.entities import (
    Notification,
    NotificationCounts,
    NotificationFilters,
    NotificationPage,
)
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone


def _normalize_page(page: int | None) -> int:
    return page if page and page > 0 else 1


def _normalize_limit(limit: int | None, settings: Settings | None) -> int:
    if limit and limit > 0:
        return limit
    return (settings or get_settings()).notification_page_size


def list_notifications(
    session: Session,
    user_id: int,
    *,
    page: int | None = 1,
    limit: int | None = None,
    filters: NotificationFilters | None = None,
    settings: Settings | None = None,
) -> NotificationPage:
    """Return one page of the user's feed, newest first."""

    page = _normalize_page(page)
    limit = _normalize_limit(limit, settings)
    repository = NotificationRepository(session)
    total = repository.count_for_user(user_id, filters)
    items = repository.list_for_user(
        user_id, filters, skip=(page - 1) * limit, limit=limit
    )
    return NotificationPage(
        items=list(items),
        total=total,
        total_pages=math.ceil(total / limit),
        current_page=page,
        limit=limit,
    )


def get_notification_counts(session: Session, user_id: int) -> NotificationCounts:
    repository = NotificationRepository(session)
    return NotificationCounts(
        unread=repository.count_unread_for_user(user_id),
        total=repository.count_for_user(user_id),
    )


def list_due_notifications(
    session: Session, *, now: datetime | None = None, limit: int | None = 100
) -> Sequence[Notification]:
    """Return pending notifications whose scheduled time has arrived."""

    return NotificationRepository(session).list_due(
        now or now_in_app_timezone(), limit=limit
    )


def list_retryable_notifications(
    session: Session, *, limit: int | None = 100
) -> Sequence[Notification]:
    return NotificationRepository(session).list_retryable(limit=limit)


__all__ = [
    "get_notification_counts",
    "list_due_notifications",
    "list_notifications",
    "list_retryable_notifications",
]
