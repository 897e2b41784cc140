"""Notification helpers called by the artwork, analysis and account workflows.

These helpers are fire-and-forget: they never raise, so the workflow that
calls them succeeds or fails on its own merits.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import (
    NotificationCategory,
    NotificationChannel,
    NotificationPriority,
)
from app.domain.errors import NotificationError

from .dispatch import DispatchResult, dispatch_notification

logger = logging.getLogger(__name__)

SECURITY_ALERT_TEMPLATES: dict[str, tuple[str, str]] = {
    "new_login": (
        "New Login Detected",
        "We detected a new login to your account from a new device. "
        "If this wasn't you, please secure your account.",
    ),
    "password_change": (
        "Password Changed",
        "Your password has been changed successfully.",
    ),
    "2fa_enabled": (
        "Two-Factor Authentication Enabled",
        "Two-factor authentication has been enabled for your account.",
    ),
    "2fa_disabled": (
        "Two-Factor Authentication Disabled",
        "Two-factor authentication has been disabled for your account.",
    ),
}
DEFAULT_SECURITY_ALERT = (
    "Security Alert",
    "A security-related action was performed on your account.",
)

ACCOUNT_UPDATE_TEMPLATES: dict[str, tuple[str, str]] = {
    "profile": (
        "Profile Updated",
        "Your profile information has been updated successfully.",
    ),
    "settings": (
        "Settings Updated",
        "Your account settings have been updated successfully.",
    ),
}
DEFAULT_ACCOUNT_UPDATE = ("Account Updated", "Your account has been updated successfully.")


def _notify(
    session: Session,
    *,
    user_id: int,
    category: NotificationCategory,
    title: str,
    message: str,
    priority: NotificationPriority,
    data: dict[str, Any] | None = None,
) -> DispatchResult | None:
    try:
        return dispatch_notification(
            session,
            user_id=user_id,
            channel=NotificationChannel.IN_APP,
            category=category,
            title=title,
            message=message,
            priority=priority,
            data=data,
        )
    except NotificationError:
        logger.exception(
            "Error creating %s notification for user %s", category.value, user_id
        )
        return None


def notify_welcome(session: Session, *, user_id: int) -> DispatchResult | None:
    """Greet a newly registered user."""

    return _notify(
        session,
        user_id=user_id,
        category=NotificationCategory.WELCOME,
        title="Welcome to NydArt Advisor!",
        message="Thank you for joining our community. Start by analyzing your first artwork!",
        priority=NotificationPriority.NORMAL,
    )


def notify_analysis_complete(
    session: Session, *, user_id: int, artwork_name: str
) -> DispatchResult | None:
    return _notify(
        session,
        user_id=user_id,
        category=NotificationCategory.ANALYSIS_COMPLETE,
        title="Analysis Complete!",
        message=(
            f'Your artwork "{artwork_name}" has been analyzed successfully. '
            "Check out the detailed results!"
        ),
        priority=NotificationPriority.NORMAL,
    )


def notify_analysis_failed(
    session: Session,
    *,
    user_id: int,
    artwork_name: str,
    error: BaseException | str | None = None,
) -> DispatchResult | None:
    return _notify(
        session,
        user_id=user_id,
        category=NotificationCategory.ANALYSIS_FAILED,
        title="Analysis Failed",
        message=(
            f'Analysis of "{artwork_name}" failed. Please try again or contact '
            "support if the issue persists."
        ),
        priority=NotificationPriority.HIGH,
        data={"error": str(error) if error is not None else None},
    )


def notify_artwork_added(
    session: Session, *, user_id: int, artwork_name: str
) -> DispatchResult | None:
    return _notify(
        session,
        user_id=user_id,
        category=NotificationCategory.ARTWORK_ADDED,
        title="Artwork Added Successfully",
        message=f'Your artwork "{artwork_name}" has been added to your collection.',
        priority=NotificationPriority.LOW,
    )


def notify_security_alert(
    session: Session,
    *,
    user_id: int,
    alert_type: str,
    details: str | None = None,
) -> DispatchResult | None:
    """Warn the user about a security-relevant action on their account.

    Unknown ``alert_type`` values fall back to a generic alert whose message is
    ``details`` when provided.
    """

    if alert_type in SECURITY_ALERT_TEMPLATES:
        title, message = SECURITY_ALERT_TEMPLATES[alert_type]
    else:
        title, message = DEFAULT_SECURITY_ALERT
        message = details or message
    return _notify(
        session,
        user_id=user_id,
        category=NotificationCategory.SECURITY_ALERT,
        title=title,
        message=message,
        priority=NotificationPriority.HIGH,
        data={"alert_type": alert_type, "details": details},
    )


def notify_account_update(
    session: Session, *, user_id: int, update_type: str
) -> DispatchResult | None:
    title, message = ACCOUNT_UPDATE_TEMPLATES.get(update_type, DEFAULT_ACCOUNT_UPDATE)
    return _notify(
        session,
        user_id=user_id,
        category=NotificationCategory.ACCOUNT_UPDATE,
        title=title,
        message=message,
        priority=NotificationPriority.LOW,
        data={"update_type": update_type},
    )


__all__ = [
    "notify_account_update",
    "notify_analysis_complete",
    "notify_analysis_failed",
    "notify_artwork_added",
    "notify_security_alert",
    "notify_welcome",
]
