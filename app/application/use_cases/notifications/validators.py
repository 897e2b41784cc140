"""Validation helpers shared by the notification use cases."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from app.domain.errors import NotificationValidationError

MAX_TITLE_LENGTH = 200

_EnumT = TypeVar("_EnumT", bound=Enum)


def coerce_enum(enum_cls: type[_EnumT], value: Any, field_name: str) -> _EnumT:
    """Return ``value`` as a member of ``enum_cls`` or raise a validation error."""

    if value is None or value == "":
        raise NotificationValidationError(f"{field_name} is required")
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise NotificationValidationError(
            f"Invalid {field_name} '{value}'. Expected one of: {allowed}"
        ) from exc


def ensure_text(value: str | None, field_name: str, *, max_length: int | None = None) -> str:
    """Return ``value`` stripped, rejecting empty or oversized text."""

    normalized = (value or "").strip()
    if not normalized:
        raise NotificationValidationError(f"{field_name} is required")
    if max_length is not None and len(normalized) > max_length:
        raise NotificationValidationError(
            f"{field_name} must be at most {max_length} characters"
        )
    return normalized


def ensure_user_id(user_id: Any) -> int:
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        raise NotificationValidationError("user_id is required")
    return user_id


def ensure_data(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise NotificationValidationError("data must be an object")
    return dict(data)


def ensure_max_retries(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise NotificationValidationError("max_retries must be a non-negative integer")
    return value
