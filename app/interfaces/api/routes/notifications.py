"""Endpoints for reading and managing the caller's notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    create_notification as create_notification_uc,
    delete_notification as delete_notification_uc,
    get_notification_counts,
    get_notification_preferences,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read,
    mark_notification_read,
    update_notification_preferences,
)
from app.config import Settings
from app.domain.entities import (
    ChannelPreferences,
    Notification,
    NotificationCategory,
    NotificationChannel,
    NotificationFilters,
    NotificationPreferences,
    NotificationStatus,
    User,
)
from app.domain.errors import (
    NotificationError,
    NotificationNotFoundError,
    NotificationValidationError,
    StoreUnavailableError,
    UserNotFoundError,
)
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_app_settings, get_current_active_user
from app.interfaces.api.schemas import (
    ChannelPreferencesSchema,
    MarkAllReadResponse,
    MessageResponse,
    NotificationCountRead,
    NotificationCreate,
    NotificationListResponse,
    NotificationPreferencesEnvelope,
    NotificationPreferencesSchema,
    NotificationPreferencesUpdated,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        user_id=notification.user_id,
        type=notification.channel,
        category=notification.category,
        title=notification.title,
        message=notification.message,
        data=notification.data or {},
        status=notification.status,
        priority=notification.priority,
        scheduled_for=notification.scheduled_for,
        sent_at=notification.sent_at,
        read_at=notification.read_at,
        retry_count=notification.retry_count,
        max_retries=notification.max_retries,
        error_message=notification.error_message,
        created_at=notification.created_at,
        updated_at=notification.updated_at,
    )


def _preferences_to_schema(preferences: NotificationPreferences) -> NotificationPreferencesSchema:
    return NotificationPreferencesSchema(
        email=ChannelPreferencesSchema(**preferences.email.to_dict()),
        sms=ChannelPreferencesSchema(**preferences.sms.to_dict()),
        in_app=ChannelPreferencesSchema(**preferences.in_app.to_dict()),
    )


def _schema_to_preferences(schema: NotificationPreferencesSchema) -> NotificationPreferences:
    return NotificationPreferences(
        email=ChannelPreferences(
            enabled=schema.email.enabled, categories=dict(schema.email.categories)
        ),
        sms=ChannelPreferences(
            enabled=schema.sms.enabled, categories=dict(schema.sms.categories)
        ),
        in_app=ChannelPreferences(
            enabled=schema.in_app.enabled, categories=dict(schema.in_app.categories)
        ),
    )


def _to_http_error(exc: NotificationError) -> HTTPException:
    if isinstance(exc, (NotificationNotFoundError, UserNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NotificationValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, StoreUnavailableError):
        logger.error("Notification store unavailable: %s", exc)
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification service temporarily unavailable",
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    status_filter: NotificationStatus | None = Query(None, alias="status"),
    category: NotificationCategory | None = None,
    channel: NotificationChannel | None = Query(None, alias="type"),
    page: int | None = None,
    limit: int | None = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return a page of the authenticated user's notifications, newest first."""

    filters = NotificationFilters(status=status_filter, category=category, channel=channel)
    try:
        result = list_notifications_uc(
            db,
            current_user.id,
            page=page,
            limit=limit,
            filters=filters,
            settings=settings,
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return NotificationListResponse(
        notifications=[_notification_to_schema(item) for item in result.items],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification_in: NotificationCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    """Create a notification addressed to the authenticated user."""

    try:
        notification = create_notification_uc(
            db,
            user_id=current_user.id,
            channel=notification_in.type,
            category=notification_in.category,
            title=notification_in.title,
            message=notification_in.message,
            priority=notification_in.priority,
            data=notification_in.data,
            scheduled_for=notification_in.scheduled_for,
            max_retries=notification_in.max_retries,
            settings=settings,
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return _notification_to_schema(notification)


@router.get("/count", response_model=NotificationCountRead)
def get_notification_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationCountRead:
    try:
        counts = get_notification_counts(db, current_user.id)
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return NotificationCountRead(unread=counts.unread, total=counts.total)


@router.get("/preferences", response_model=NotificationPreferencesEnvelope)
def read_notification_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPreferencesEnvelope:
    try:
        preferences = get_notification_preferences(db, current_user.id)
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return NotificationPreferencesEnvelope(
        notification_preferences=_preferences_to_schema(preferences)
    )


@router.put("/preferences", response_model=NotificationPreferencesUpdated)
def replace_notification_preferences(
    preferences_in: NotificationPreferencesEnvelope,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPreferencesUpdated:
    """Replace the authenticated user's whole preference matrix."""

    try:
        saved = update_notification_preferences(
            db,
            current_user.id,
            _schema_to_preferences(preferences_in.notification_preferences),
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return NotificationPreferencesUpdated(
        message="Notification preferences updated",
        notification_preferences=_preferences_to_schema(saved),
    )


@router.patch("/mark-all-read", response_model=MarkAllReadResponse)
def mark_all_as_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkAllReadResponse:
    try:
        updated = mark_all_notifications_read(db, user_id=current_user.id)
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.patch("/{notification_id}/read", response_model=MessageResponse)
def mark_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    try:
        mark_notification_read(db, notification_id, user_id=current_user.id)
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return MessageResponse(message="Notification marked as read")


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    try:
        delete_notification_uc(db, notification_id, user_id=current_user.id)
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return MessageResponse(message="Notification deleted")
