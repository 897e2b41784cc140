"""Use cases for reading and replacing a user's notification preferences."""

from sqlalchemy.orm import Session

from app.domain.entities import NotificationPreferences
from app.domain.errors import UserNotFoundError
from app.infrastructure.repositories import UserRepository


def get_notification_preferences(session: Session, user_id: int) -> NotificationPreferences:
    preferences = UserRepository(session).get_preferences(user_id)
    if preferences is None:
        raise UserNotFoundError(user_id)
    return preferences


def update_notification_preferences(
    session: Session, user_id: int, preferences: NotificationPreferences
) -> NotificationPreferences:
    """Replace the whole preference matrix of ``user_id``."""

    saved = UserRepository(session).set_preferences(user_id, preferences)
    if saved is None:
        raise UserNotFoundError(user_id)
    return saved
