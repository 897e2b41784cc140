"""Per-user notification opt-in matrix."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .notification import NotificationCategory, NotificationChannel

_ALL_CATEGORIES = (
    NotificationCategory.WELCOME,
    NotificationCategory.SECURITY_ALERT,
    NotificationCategory.ANALYSIS_COMPLETE,
    NotificationCategory.ANALYSIS_FAILED,
    NotificationCategory.ACCOUNT_UPDATE,
    NotificationCategory.SUBSCRIPTION,
    NotificationCategory.ARTWORK_ADDED,
    NotificationCategory.ARTWORK_UPDATED,
    NotificationCategory.SYSTEM_ALERT,
)

# Stored documents written by older clients use the camel-cased key.
_SECTION_ALIASES = {"in_app": ("in_app", "inApp")}


@dataclass
class ChannelPreferences:
    """Opt-in flags for a single delivery channel."""

    enabled: bool = True
    categories: dict[str, bool] = field(default_factory=dict)

    def allows(self, category: NotificationCategory | str) -> bool:
        """Return whether ``category`` may be delivered on this channel.

        Categories missing from the map are allowed so that notification types
        introduced after the user last saved their preferences still arrive.
        """

        if not self.enabled:
            return False
        key = category.value if isinstance(category, NotificationCategory) else str(category)
        return bool(self.categories.get(key, True))

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "categories": dict(self.categories)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ChannelPreferences":
        if not data:
            return cls()
        categories = data.get("categories") or {}
        return cls(
            enabled=bool(data.get("enabled", True)),
            categories={str(key): bool(value) for key, value in categories.items()},
        )


@dataclass
class NotificationPreferences:
    """Channel by category matrix embedded in the user profile."""

    email: ChannelPreferences = field(default_factory=ChannelPreferences)
    sms: ChannelPreferences = field(default_factory=ChannelPreferences)
    in_app: ChannelPreferences = field(default_factory=ChannelPreferences)

    def for_channel(self, channel: NotificationChannel) -> ChannelPreferences | None:
        """Return the section governing ``channel`` or ``None`` when it has none."""

        if channel is NotificationChannel.EMAIL:
            return self.email
        if channel is NotificationChannel.SMS:
            return self.sms
        if channel is NotificationChannel.IN_APP:
            return self.in_app
        return None

    def is_enabled(
        self, channel: NotificationChannel, category: NotificationCategory
    ) -> bool:
        """Return ``True`` when ``category`` may be delivered on ``channel``."""

        section = self.for_channel(channel)
        if section is None:
            return True
        return section.allows(category)

    @classmethod
    def default(cls) -> "NotificationPreferences":
        """Return the preferences assigned to newly registered users."""

        sms_categories = {
            NotificationCategory.SECURITY_ALERT.value: True,
            NotificationCategory.ANALYSIS_COMPLETE.value: True,
            NotificationCategory.ANALYSIS_FAILED.value: True,
            NotificationCategory.ACCOUNT_UPDATE.value: False,
            NotificationCategory.SUBSCRIPTION.value: True,
            NotificationCategory.SYSTEM_ALERT.value: True,
        }
        return cls(
            email=ChannelPreferences(
                enabled=True,
                categories={category.value: True for category in _ALL_CATEGORIES},
            ),
            sms=ChannelPreferences(enabled=False, categories=sms_categories),
            in_app=ChannelPreferences(
                enabled=True,
                categories={category.value: True for category in _ALL_CATEGORIES},
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "email": self.email.to_dict(),
            "sms": self.sms.to_dict(),
            "in_app": self.in_app.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "NotificationPreferences":
        """Build preferences from a stored document, defaulting absent sections."""

        defaults = cls.default()
        if not data:
            return defaults
        sections = {}
        for name in ("email", "sms", "in_app"):
            raw = _section(data, name)
            sections[name] = (
                getattr(defaults, name) if raw is None else ChannelPreferences.from_dict(raw)
            )
        return cls(**sections)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any] | None:
    for key in _SECTION_ALIASES.get(name, (name,)):
        if key in data:
            return data[key]
    return None


__all__ = ["ChannelPreferences", "NotificationPreferences"]
