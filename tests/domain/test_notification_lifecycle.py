"""Tests for the pure notification state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from app.domain import notification_lifecycle as lifecycle
from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationChannel,
    NotificationStatus,
)
from app.domain.errors import InvalidNotificationTransitionError

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _notification(**overrides) -> Notification:
    values = {
        "id": "abc",
        "user_id": 1,
        "channel": NotificationChannel.IN_APP,
        "category": NotificationCategory.ANALYSIS_COMPLETE,
        "title": "Analysis Complete!",
        "message": "Done",
        "scheduled_for": NOW,
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return Notification(**values)


def test_mark_sent_from_pending_stamps_sent_at():
    sent = lifecycle.mark_sent(_notification(), now=NOW)

    assert sent.status is NotificationStatus.SENT
    assert sent.sent_at == NOW
    assert sent.read_at is None


@pytest.mark.parametrize("status", [NotificationStatus.SENT, NotificationStatus.READ])
def test_mark_sent_is_a_noop_after_delivery(status):
    notification = _notification(status=status, sent_at=NOW - timedelta(hours=1))

    assert lifecycle.mark_sent(notification, now=NOW) is notification


def test_mark_sent_rejects_failed_records():
    with pytest.raises(InvalidNotificationTransitionError):
        lifecycle.mark_sent(_notification(status=NotificationStatus.FAILED), now=NOW)


def test_mark_read_is_idempotent():
    first = lifecycle.mark_read(_notification(), now=NOW)
    second = lifecycle.mark_read(first, now=NOW + timedelta(minutes=5))

    assert second is first
    assert second.status is NotificationStatus.READ
    assert second.read_at == NOW


def test_mark_read_keeps_sent_at():
    sent = lifecycle.mark_sent(_notification(), now=NOW)
    read = lifecycle.mark_read(sent, now=NOW + timedelta(minutes=1))

    assert read.sent_at == NOW
    assert read.read_at == NOW + timedelta(minutes=1)


def test_mark_failed_increments_by_one_until_exhausted():
    notification = _notification(max_retries=3)
    counts = []
    for attempt in range(5):
        notification = lifecycle.mark_failed(notification, f"timeout {attempt}", now=NOW)
        counts.append(notification.retry_count)

    assert counts == [1, 2, 3, 3, 3]
    assert notification.status is NotificationStatus.FAILED
    assert notification.error_message == "timeout 2"
    assert notification.exhausted
    assert lifecycle.is_retry_exhausted(notification)


def test_mark_failed_with_zero_retries_never_exceeds_cap():
    failed = lifecycle.mark_failed(_notification(max_retries=0), "boom", now=NOW)

    assert failed.status is NotificationStatus.FAILED
    assert failed.retry_count == 0
    assert failed.exhausted


@pytest.mark.parametrize("status", [NotificationStatus.SENT, NotificationStatus.READ])
def test_mark_failed_rejects_delivered_records(status):
    with pytest.raises(InvalidNotificationTransitionError):
        lifecycle.mark_failed(_notification(status=status), "late bounce", now=NOW)


def test_requeue_returns_failed_record_to_pending():
    failed = lifecycle.mark_failed(_notification(), "smtp down", now=NOW)
    later = NOW + timedelta(minutes=10)

    requeued = lifecycle.requeue(failed, now=later)

    assert requeued.status is NotificationStatus.PENDING
    assert requeued.retry_count == 1
    assert requeued.scheduled_for == later


def test_requeue_rejects_exhausted_records():
    exhausted = _notification(
        status=NotificationStatus.FAILED, retry_count=3, max_retries=3
    )

    with pytest.raises(InvalidNotificationTransitionError):
        lifecycle.requeue(exhausted, now=NOW)


def test_three_failures_with_requeues_end_terminally_failed():
    notification = _notification(max_retries=3)
    for _ in range(3):
        notification = lifecycle.mark_failed(notification, "unreachable", now=NOW)
        if not notification.exhausted:
            notification = lifecycle.requeue(notification, now=NOW)

    assert notification.status is NotificationStatus.FAILED
    assert notification.retry_count == 3
    assert lifecycle.mark_failed(notification, "again", now=NOW) is notification
