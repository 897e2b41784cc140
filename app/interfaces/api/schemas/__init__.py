from .notification import (
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
