"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.domain.entities import (
    NotificationCategory,
    NotificationChannel,
    NotificationPriority,
    NotificationStatus,
)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    user_id: int
    type: NotificationChannel = Field(validation_alias=AliasChoices("type", "channel"))
    category: NotificationCategory
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    status: NotificationStatus
    priority: NotificationPriority
    scheduled_for: datetime
    sent_at: datetime | None = None
    read_at: datetime | None = None
    retry_count: int
    max_retries: int
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime


class NotificationCreate(BaseModel):
    """Payload accepted when a notification is created directly."""

    type: NotificationChannel = NotificationChannel.IN_APP
    category: NotificationCategory
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL
    scheduled_for: datetime | None = None
    max_retries: int | None = Field(default=None, ge=0)


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    total: int
    total_pages: int
    current_page: int


class NotificationCountRead(BaseModel):
    unread: int
    total: int


class ChannelPreferencesSchema(BaseModel):
    enabled: bool = True
    categories: dict[str, bool] = Field(default_factory=dict)


class NotificationPreferencesSchema(BaseModel):
    """Full preference matrix; ``inApp`` is accepted for the in-app section."""

    model_config = ConfigDict(populate_by_name=True)

    email: ChannelPreferencesSchema
    sms: ChannelPreferencesSchema
    in_app: ChannelPreferencesSchema = Field(
        validation_alias=AliasChoices("in_app", "inApp")
    )


class NotificationPreferencesEnvelope(BaseModel):
    notification_preferences: NotificationPreferencesSchema = Field(
        validation_alias=AliasChoices("notification_preferences", "notificationPreferences")
    )


class NotificationPreferencesUpdated(NotificationPreferencesEnvelope):
    message: str


class MessageResponse(BaseModel):
    message: str


class MarkAllReadResponse(MessageResponse):
    updated: int


__all__ = [
    "ChannelPreferencesSchema",
    "MarkAllReadResponse",
    "MessageResponse",
    "NotificationCountRead",
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationPreferencesEnvelope",
    "NotificationPreferencesSchema",
    "NotificationPreferencesUpdated",
    "NotificationRead",
]
