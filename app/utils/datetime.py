"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import Settings, get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


_configured_timezone: tzinfo | None = None


def configure_app_timezone(settings: Settings | None) -> None:
    """Pin the application timezone to ``settings``; ``None`` clears the pin."""

    global _configured_timezone
    if settings is None:
        _configured_timezone = None
        return
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    _configured_timezone = _resolve_timezone(tz_name)


def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    A timezone pinned by :func:`configure_app_timezone` wins; otherwise it is
    resolved from ``APP_TIMEZONE``. Values such as ``Europe/Paris`` or
    ``UTC+02:00`` are accepted; anything else falls back to UTC.
    """

    if _configured_timezone is not None:
        return _configured_timezone
    return _timezone_from_environment()


@lru_cache(maxsize=1)
def _timezone_from_environment() -> tzinfo:
    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Return the current localized time without attaching ``tzinfo``."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in the configured timezone.

    Naive values are assumed to already be in the application timezone, which
    is how they are written to the database.
    """

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` localized to the app timezone but without ``tzinfo``."""

    localized = ensure_app_timezone(value)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)


def _resolve_timezone(tz_name: str) -> tzinfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            return timezone(sign * timedelta(hours=hours, minutes=minutes))
    return timezone.utc
