"""Errors raised by the notification core."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for every notification failure."""


class NotificationNotFoundError(NotificationError):
    """The record does not exist or belongs to another user."""

    def __init__(self, notification_id: str | None = None) -> None:
        super().__init__("Notification not found")
        self.notification_id = notification_id


class UserNotFoundError(NotificationError):
    """The referenced user does not exist."""

    def __init__(self, user_id: int | None = None) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class NotificationValidationError(NotificationError):
    """A required field is missing or an enumerated value is unknown."""


class InvalidNotificationTransitionError(NotificationValidationError):
    """The requested status change is not allowed from the current status."""


class StoreUnavailableError(NotificationError):
    """The persistent store could not complete the operation."""


__all__ = [
    "InvalidNotificationTransitionError",
    "NotificationError",
    "NotificationNotFoundError",
    "NotificationValidationError",
    "StoreUnavailableError",
    "UserNotFoundError",
]
