"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationChannel(str, Enum):
    """Delivery medium a notification is addressed to."""

    EMAIL = "email"
    SMS = "sms"
    IN_APP = "in_app"
    PUSH = "push"


class NotificationCategory(str, Enum):
    """Semantic kind of event a notification represents."""

    WELCOME = "welcome"
    PASSWORD_RESET = "password_reset"
    SECURITY_ALERT = "security_alert"
    ANALYSIS_COMPLETE = "analysis_complete"
    ANALYSIS_FAILED = "analysis_failed"
    ACCOUNT_UPDATE = "account_update"
    SUBSCRIPTION = "subscription"
    SYSTEM_ALERT = "system_alert"
    ARTWORK_ADDED = "artwork_added"
    ARTWORK_UPDATED = "artwork_updated"


class NotificationStatus(str, Enum):
    """Delivery state of a notification."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    READ = "read"


class NotificationPriority(str, Enum):
    """Informational urgency attached to a notification."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


DEFAULT_MAX_RETRIES = 3


@dataclass
class Notification:
    """Information message addressed to a specific user."""

    id: str | None
    user_id: int
    channel: NotificationChannel
    category: NotificationCategory
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    status: NotificationStatus = NotificationStatus.PENDING
    priority: NotificationPriority = NotificationPriority.NORMAL
    scheduled_for: datetime | None = None
    sent_at: datetime | None = None
    read_at: datetime | None = None
    retry_count: int = 0
    max_retries: int = DEFAULT_MAX_RETRIES
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.status is NotificationStatus.READ

    @property
    def exhausted(self) -> bool:
        """``True`` once no further delivery attempt may be made."""

        return (
            self.status is NotificationStatus.FAILED
            and self.retry_count >= self.max_retries
        )


@dataclass(frozen=True)
class NotificationFilters:
    """Optional equality filters applied to notification feeds."""

    status: NotificationStatus | None = None
    category: NotificationCategory | None = None
    channel: NotificationChannel | None = None


@dataclass(frozen=True)
class NotificationPage:
    """A single page of a user's notification feed."""

    items: list[Notification]
    total: int
    total_pages: int
    current_page: int
    limit: int


@dataclass(frozen=True)
class NotificationCounts:
    """Unread and total notification counters for a user."""

    unread: int
    total: int


__all__ = [
    "DEFAULT_MAX_RETRIES",
    "Notification",
    "NotificationCategory",
    "NotificationChannel",
    "NotificationCounts",
    "NotificationFilters",
    "NotificationPage",
    "NotificationPriority",
    "NotificationStatus",
]
