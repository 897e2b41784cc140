"""Tests for the SQLAlchemy notification repository."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.application.use_cases.notifications import (
    create_notification,
    mark_notification_read,
)
from app.domain import notification_lifecycle
from app.domain.entities import NotificationStatus
from app.domain.errors import StoreUnavailableError
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone


@pytest.fixture()
def notification(session, make_user):
    user = make_user()
    return create_notification(
        session,
        user_id=user.id,
        channel="email",
        category="security_alert",
        title="New Login Detected",
        message="A new device signed in.",
        data={"alert_type": "new_login", "details": None},
    )


def test_create_assigns_identifier_and_keeps_payload(notification):
    assert len(notification.id) == 32
    assert notification.data == {"alert_type": "new_login", "details": None}
    assert notification.scheduled_for.tzinfo is not None


def test_get_for_user_is_scoped_by_owner(session, notification):
    repository = NotificationRepository(session)

    assert repository.get_for_user(notification.id, notification.user_id) is not None
    assert repository.get_for_user(notification.id, notification.user_id + 1) is None


def test_compare_and_set_rejects_stale_state(session, notification):
    repository = NotificationRepository(session)
    current = repository.get(notification.id)
    now = now_in_app_timezone()

    assert repository.compare_and_set(
        current, notification_lifecycle.mark_sent(current, now=now)
    )
    stale_update = notification_lifecycle.mark_failed(current, "bounce", now=now)
    assert repository.compare_and_set(current, stale_update) is False

    stored = repository.get(notification.id)
    assert stored.status is NotificationStatus.SENT
    assert stored.retry_count == 0


def test_transition_gives_up_when_record_keeps_changing(
    session, notification, monkeypatch
):
    calls = []

    def _always_lost(self, current, updated):
        calls.append(current.id)
        return False

    monkeypatch.setattr(NotificationRepository, "compare_and_set", _always_lost)

    with pytest.raises(StoreUnavailableError):
        mark_notification_read(session, notification.id, user_id=notification.user_id)
    assert len(calls) == 5


def test_due_listing_is_ordered_by_schedule(session, make_user):
    user = make_user()
    now = now_in_app_timezone()
    create_notification(
        session,
        user_id=user.id,
        channel="in_app",
        category="welcome",
        title="Second",
        message="Second",
        scheduled_for=now - timedelta(minutes=1),
    )
    early = create_notification(
        session,
        user_id=user.id,
        channel="in_app",
        category="welcome",
        title="First",
        message="First",
        scheduled_for=now - timedelta(minutes=10),
    )

    due = NotificationRepository(session).list_due(now, limit=1)

    assert [item.id for item in due] == [early.id]


def test_store_errors_become_store_unavailable(session, notification, monkeypatch, caplog):
    repository = NotificationRepository(session)
    rolled_back = []

    def _broken_execute(*args, **kwargs):
        raise OperationalError("UPDATE notification", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "execute", _broken_execute)
    monkeypatch.setattr(session, "rollback", lambda: rolled_back.append(True))

    with pytest.raises(StoreUnavailableError):
        repository.mark_all_read(notification.user_id, read_at=now_in_app_timezone())

    assert rolled_back == [True]
    assert "Could not mark notifications as read" in caplog.text
