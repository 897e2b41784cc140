"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
import logging
from typing import NoReturn

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationChannel,
    NotificationFilters,
    NotificationPriority,
    NotificationStatus,
)
from app.domain.errors import StoreUnavailableError
from app.infrastructure.models import NotificationModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide storage operations for :class:`Notification` objects.

    Single-record reads and deletes are always scoped by owner. Status changes
    go through :meth:`compare_and_set`, a conditional ``UPDATE`` that only
    succeeds while the row still holds the state the caller read.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        try:
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        except SQLAlchemyError as exc:
            self._rollback(exc, "create notification")
        return self._to_entity(model)

    def get(self, notification_id: str) -> Notification | None:
        try:
            model = self.session.get(NotificationModel, notification_id)
        except SQLAlchemyError as exc:
            self._rollback(exc, "load notification")
        return self._to_entity(model) if model else None

    def get_for_user(self, notification_id: str, user_id: int) -> Notification | None:
        try:
            model = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.id == notification_id)
                .filter(NotificationModel.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as exc:
            self._rollback(exc, "load notification")
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: int,
        filters: NotificationFilters | None = None,
        *,
        skip: int = 0,
        limit: int | None = 20,
    ) -> Sequence[Notification]:
        query = self._filtered_query(user_id, filters).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        try:
            models = query.all()
        except SQLAlchemyError as exc:
            self._rollback(exc, "list notifications")
        return [self._to_entity(model) for model in models]

    def count_for_user(
        self, user_id: int, filters: NotificationFilters | None = None
    ) -> int:
        query = self._filtered_query(user_id, filters)
        return self._count(query.with_entities(func.count(NotificationModel.id)))

    def count_unread_for_user(self, user_id: int) -> int:
        query = (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.status != NotificationStatus.READ.value)
        )
        return self._count(query)

    def compare_and_set(self, current: Notification, updated: Notification) -> bool:
        """Persist the status fields of ``updated`` if the row still matches ``current``.

        Returns ``False`` when another writer changed the record first.
        """

        statement = (
            update(NotificationModel)
            .where(NotificationModel.id == current.id)
            .where(NotificationModel.user_id == current.user_id)
            .where(NotificationModel.status == current.status.value)
            .where(NotificationModel.retry_count == current.retry_count)
            .values(
                status=updated.status.value,
                sent_at=ensure_app_naive_datetime(updated.sent_at),
                read_at=ensure_app_naive_datetime(updated.read_at),
                retry_count=updated.retry_count,
                error_message=updated.error_message,
                scheduled_for=ensure_app_naive_datetime(updated.scheduled_for),
                updated_at=ensure_app_naive_datetime(
                    updated.updated_at or now_in_app_timezone()
                ),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as exc:
            self._rollback(exc, "update notification status")
        return result.rowcount == 1

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        """Mark every unread record of ``user_id`` as read in one statement."""

        stamp = ensure_app_naive_datetime(read_at)
        statement = (
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .where(NotificationModel.status != NotificationStatus.READ.value)
            .values(
                status=NotificationStatus.READ.value,
                read_at=stamp,
                updated_at=stamp,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as exc:
            self._rollback(exc, "mark notifications as read")
        return result.rowcount or 0

    def delete_for_user(self, notification_id: str, user_id: int) -> bool:
        try:
            deleted = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.id == notification_id)
                .filter(NotificationModel.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self._rollback(exc, "delete notification")
        return deleted == 1

    def list_due(self, now: datetime, *, limit: int | None = 100) -> Sequence[Notification]:
        """Return pending records whose ``scheduled_for`` is not in the future."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.scheduled_for <= ensure_app_naive_datetime(now))
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .order_by(NotificationModel.scheduled_for.asc(), NotificationModel.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        try:
            models = query.all()
        except SQLAlchemyError as exc:
            self._rollback(exc, "list due notifications")
        return [self._to_entity(model) for model in models]

    def list_retryable(self, *, limit: int | None = 100) -> Sequence[Notification]:
        """Return failed records that still have delivery attempts left."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NotificationStatus.FAILED.value)
            .filter(NotificationModel.retry_count < NotificationModel.max_retries)
            .order_by(NotificationModel.updated_at.asc(), NotificationModel.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        try:
            models = query.all()
        except SQLAlchemyError as exc:
            self._rollback(exc, "list retryable notifications")
        return [self._to_entity(model) for model in models]

    def _filtered_query(
        self, user_id: int, filters: NotificationFilters | None
    ) -> Query:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if filters is None:
            return query
        if filters.status is not None:
            query = query.filter(NotificationModel.status == filters.status.value)
        if filters.category is not None:
            query = query.filter(NotificationModel.category == filters.category.value)
        if filters.channel is not None:
            query = query.filter(NotificationModel.channel == filters.channel.value)
        return query

    def _count(self, query: Query) -> int:
        try:
            return int(query.scalar() or 0)
        except SQLAlchemyError as exc:
            self._rollback(exc, "count notifications")

    def _rollback(self, exc: SQLAlchemyError, action: str) -> NoReturn:
        logger.error("Could not %s: %s", action, exc)
        self.session.rollback()
        raise StoreUnavailableError(f"Could not {action}") from exc

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        now = now_in_app_timezone()
        if notification.id is not None:
            model.id = notification.id
        model.user_id = notification.user_id
        model.channel = notification.channel.value
        model.category = notification.category.value
        model.title = notification.title
        model.message = notification.message
        model.data = notification.data or {}
        model.status = notification.status.value
        model.priority = notification.priority.value
        model.scheduled_for = ensure_app_naive_datetime(notification.scheduled_for or now)
        model.sent_at = ensure_app_naive_datetime(notification.sent_at)
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.retry_count = notification.retry_count
        model.max_retries = notification.max_retries
        model.error_message = notification.error_message
        model.created_at = ensure_app_naive_datetime(notification.created_at or now)
        model.updated_at = ensure_app_naive_datetime(notification.updated_at or now)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            channel=NotificationChannel(model.channel),
            category=NotificationCategory(model.category),
            title=model.title,
            message=model.message,
            data=model.data or {},
            status=NotificationStatus(model.status),
            priority=NotificationPriority(model.priority),
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            sent_at=ensure_app_timezone(model.sent_at),
            read_at=ensure_app_timezone(model.read_at),
            retry_count=model.retry_count,
            max_retries=model.max_retries,
            error_message=model.error_message,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRepository"]
