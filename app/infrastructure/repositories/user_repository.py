"""Persistence layer for user data."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import NotificationPreferences, User
from app.domain.errors import StoreUnavailableError
from app.infrastructure.models import UserModel
from app.utils import ensure_app_timezone, now_in_app_naive_datetime

logger = logging.getLogger(__name__)


class UserRepository:
    """Provide the user operations the notification core depends on."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self._get_model(id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self._get_model(email=email)
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            username=user.username,
            email=user.email,
            is_active=user.is_active,
            notification_preferences=user.notification_preferences.to_dict(),
        )
        try:
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        except SQLAlchemyError as exc:
            logger.error("Could not create user %s: %s", user.email, exc)
            self.session.rollback()
            raise StoreUnavailableError("Could not create user") from exc
        return self._to_entity(model)

    def get_preferences(self, user_id: int) -> NotificationPreferences | None:
        model = self._get_model(id=user_id)
        if model is None:
            return None
        return NotificationPreferences.from_dict(model.notification_preferences)

    def set_preferences(
        self, user_id: int, preferences: NotificationPreferences
    ) -> NotificationPreferences | None:
        model = self._get_model(id=user_id)
        if model is None:
            return None
        model.notification_preferences = preferences.to_dict()
        model.updated_at = now_in_app_naive_datetime()
        try:
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        except SQLAlchemyError as exc:
            logger.error("Could not save preferences for user %s: %s", user_id, exc)
            self.session.rollback()
            raise StoreUnavailableError("Could not save notification preferences") from exc
        return NotificationPreferences.from_dict(model.notification_preferences)

    def _get_model(self, **filters) -> UserModel | None:
        try:
            return self.session.query(UserModel).filter_by(**filters).first()
        except SQLAlchemyError as exc:
            logger.error("Could not load user %s: %s", filters, exc)
            self.session.rollback()
            raise StoreUnavailableError("Could not load user") from exc

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            is_active=model.is_active,
            notification_preferences=NotificationPreferences.from_dict(
                model.notification_preferences
            ),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )
