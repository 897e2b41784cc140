"""SQLAlchemy model for persisted notifications."""

from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


def _generate_notification_id() -> str:
    return uuid4().hex


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_status_created", "user_id", "status", "created_at"),
        Index("ix_notification_scheduled_status", "scheduled_for", "status"),
        Index("ix_notification_category_status", "category", "status"),
    )

    id = Column(String(32), primary_key=True, default=_generate_notification_id)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    channel = Column(String(16), nullable=False)
    category = Column(String(32), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    status = Column(String(16), nullable=False, default="pending")
    priority = Column(String(16), nullable=False, default="normal")
    scheduled_for = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    sent_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)
    retry_count = Column(Integer, nullable=False, default=0)
    max_retries = Column(Integer, nullable=False, default=3)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationModel"]
