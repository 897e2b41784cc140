"""Domain entity representing a user."""

from dataclasses import dataclass, field
from datetime import datetime

from .notification_preferences import NotificationPreferences


@dataclass
class User:
    """Attributes of an application user relevant to notifications."""

    id: int | None
    username: str
    email: str
    is_active: bool = True
    notification_preferences: NotificationPreferences = field(
        default_factory=NotificationPreferences.default
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None
