"""Use cases for creating, reading and updating notifications."""

from .dispatch import (
    DispatchResult,
    DispatchStatus,
    create_notification,
    dispatch_notification,
)
from .events import (
    notify_account_update,
    notify_analysis_complete,
    notify_analysis_failed,
    notify_artwork_added,
    notify_security_alert,
    notify_welcome,
)
from .lifecycle import (
    delete_notification,
    mark_all_notifications_read,
    mark_notification_failed,
    mark_notification_read,
    mark_notification_sent,
    requeue_notification,
)
from .preferences import get_notification_preferences, update_notification_preferences
from .queries import (
    get_notification_counts,
    list_due_notifications,
    list_notifications,
    list_retryable_notifications,
)

__all__ = [
    "DispatchResult",
    "DispatchStatus",
    "create_notification",
    "dispatch_notification",
    "notify_account_update",
    "notify_analysis_complete",
    "notify_analysis_failed",
    "notify_artwork_added",
    "notify_security_alert",
    "notify_welcome",
    "delete_notification",
    "mark_all_notifications_read",
    "mark_notification_failed",
    "mark_notification_read",
    "mark_notification_sent",
    "requeue_notification",
    "get_notification_preferences",
    "update_notification_preferences",
    "get_notification_counts",
    "list_due_notifications",
    "list_notifications",
    "list_retryable_notifications",
]
