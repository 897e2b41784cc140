"""Domain entities exposed by the application."""

from .notification import (
    DEFAULT_MAX_RETRIES,
    Notification,
    NotificationCategory,
    NotificationChannel,
    NotificationCounts,
    NotificationFilters,
    NotificationPage,
    NotificationPriority,
    NotificationStatus,
)
from .notification_preferences import ChannelPreferences, NotificationPreferences
from .user import User

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "ChannelPreferences",
    "Notification",
    "NotificationCategory",
    "NotificationChannel",
    "NotificationCounts",
    "NotificationFilters",
    "NotificationPage",
    "NotificationPreferences",
    "NotificationPriority",
    "NotificationStatus",
    "User",
]
