"""Tests for lifecycle use cases running against a real session."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    create_notification,
    delete_notification,
    get_notification_counts,
    list_retryable_notifications,
    mark_all_notifications_read,
    mark_notification_failed,
    mark_notification_read,
    mark_notification_sent,
    requeue_notification,
)
from app.domain.entities import NotificationStatus
from app.domain.errors import (
    InvalidNotificationTransitionError,
    NotificationNotFoundError,
    NotificationValidationError,
)
from app.infrastructure.repositories import NotificationRepository


@pytest.fixture()
def owner(make_user):
    return make_user()


@pytest.fixture()
def intruder(make_user):
    return make_user()


@pytest.fixture()
def create(session):
    def _create(user, **overrides):
        values = {
            "user_id": user.id,
            "channel": "in_app",
            "category": "analysis_complete",
            "title": "Analysis Complete!",
            "message": "Results are ready.",
        }
        values.update(overrides)
        return create_notification(session, **values)

    return _create


def test_mark_read_twice_keeps_first_read_at(session, owner, create):
    notification = create(owner)

    mark_notification_read(session, notification.id, user_id=owner.id)
    first = NotificationRepository(session).get(notification.id)
    mark_notification_read(session, notification.id, user_id=owner.id)
    second = NotificationRepository(session).get(notification.id)

    assert first.status is NotificationStatus.READ
    assert second.status is NotificationStatus.READ
    assert second.read_at == first.read_at
    assert second.updated_at == first.updated_at


def test_mark_read_from_another_user_is_not_found(session, owner, intruder, create):
    notification = create(owner)

    with pytest.raises(NotificationNotFoundError):
        mark_notification_read(session, notification.id, user_id=intruder.id)

    stored = NotificationRepository(session).get(notification.id)
    assert stored.status is NotificationStatus.PENDING
    assert stored.read_at is None


def test_delete_from_another_user_is_not_found(session, owner, intruder, create):
    notification = create(owner)

    with pytest.raises(NotificationNotFoundError):
        delete_notification(session, notification.id, user_id=intruder.id)

    assert NotificationRepository(session).get(notification.id) is not None


def test_delete_removes_the_record(session, owner, create):
    notification = create(owner)

    delete_notification(session, notification.id, user_id=owner.id)

    assert NotificationRepository(session).get(notification.id) is None
    with pytest.raises(NotificationNotFoundError):
        delete_notification(session, notification.id, user_id=owner.id)


def test_unknown_identifier_is_not_found(session, owner):
    with pytest.raises(NotificationNotFoundError):
        mark_notification_read(session, "does-not-exist", user_id=owner.id)
    with pytest.raises(NotificationNotFoundError):
        mark_notification_sent(session, "does-not-exist")


def test_mark_sent_then_read(session, owner, create):
    notification = create(owner)

    sent = mark_notification_sent(session, notification.id)
    again = mark_notification_sent(session, notification.id)
    read = mark_notification_read(session, notification.id, user_id=owner.id)

    assert sent.status is NotificationStatus.SENT
    assert again.sent_at == NotificationRepository(session).get(notification.id).sent_at
    assert read.status is NotificationStatus.READ
    assert read.sent_at is not None
    assert mark_notification_sent(session, notification.id).status is NotificationStatus.READ


def test_mark_sent_rejects_failed_record(session, owner, create):
    notification = create(owner)
    mark_notification_failed(session, notification.id, error_message="smtp refused")

    with pytest.raises(InvalidNotificationTransitionError):
        mark_notification_sent(session, notification.id)


def test_failures_are_capped_at_max_retries(session, owner, create):
    notification = create(owner, max_retries=3)

    counts = [
        mark_notification_failed(
            session, notification.id, error_message=f"attempt {attempt}"
        ).retry_count
        for attempt in range(4)
    ]

    stored = NotificationRepository(session).get(notification.id)
    assert counts == [1, 2, 3, 3]
    assert stored.status is NotificationStatus.FAILED
    assert stored.retry_count == 3
    assert stored.error_message == "attempt 2"
    assert stored.exhausted


def test_retry_cycle_until_exhausted(session, owner, create):
    notification = create(owner, max_retries=3)

    for attempt in range(3):
        failed = mark_notification_failed(session, notification.id, error_message="timeout")
        assert failed.retry_count == attempt + 1
        if not failed.exhausted:
            assert requeue_notification(session, notification.id).status is NotificationStatus.PENDING

    assert list_retryable_notifications(session) == []
    with pytest.raises(InvalidNotificationTransitionError):
        requeue_notification(session, notification.id)


def test_retryable_listing_excludes_exhausted_records(session, owner, create):
    retryable = create(owner, max_retries=2)
    exhausted = create(owner, max_retries=1)
    mark_notification_failed(session, retryable.id, error_message="bounce")
    mark_notification_failed(session, exhausted.id, error_message="bounce")

    assert [item.id for item in list_retryable_notifications(session)] == [retryable.id]


def test_mark_failed_requires_reason(session, owner, create):
    notification = create(owner)

    with pytest.raises(NotificationValidationError):
        mark_notification_failed(session, notification.id, error_message=" ")


@pytest.mark.parametrize("existing", [0, 1, 50])
def test_mark_all_read_leaves_no_unread(session, owner, intruder, create, existing):
    for _ in range(existing):
        create(owner)
    other = create(intruder)

    updated = mark_all_notifications_read(session, user_id=owner.id)

    assert updated == existing
    assert get_notification_counts(session, owner.id).unread == 0
    assert get_notification_counts(session, owner.id).total == existing
    assert NotificationRepository(session).get(other.id).status is NotificationStatus.PENDING


def test_mark_all_read_uses_one_timestamp_and_keeps_read_records(session, owner, create):
    already_read = create(owner)
    mark_notification_read(session, already_read.id, user_id=owner.id)
    original_read_at = NotificationRepository(session).get(already_read.id).read_at
    pending = [create(owner) for _ in range(3)]

    mark_all_notifications_read(session, user_id=owner.id)

    repository = NotificationRepository(session)
    stamps = {repository.get(item.id).read_at for item in pending}
    assert len(stamps) == 1
    assert repository.get(already_read.id).read_at == original_read_at
