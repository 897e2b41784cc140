"""Use case for creating users."""

from sqlalchemy.orm import Session

from app.application.use_cases.notifications import notify_welcome
from app.domain.entities import NotificationPreferences, User
from app.infrastructure.repositories import UserRepository


def create_user(
    session: Session,
    *,
    username: str,
    email: str,
    preferences: NotificationPreferences | None = None,
) -> User:
    """Create a new user ensuring unique email addresses, then greet them."""

    repository = UserRepository(session)

    normalized_email = email.strip().lower()
    if not username.strip():
        raise ValueError("Username is required")
    if repository.get_by_email(normalized_email):
        raise ValueError("Email is already registered")

    user = User(
        id=None,
        username=username.strip(),
        email=normalized_email,
        is_active=True,
        notification_preferences=preferences or NotificationPreferences.default(),
    )
    created = repository.create(user)
    notify_welcome(session, user_id=created.id)
    return created
