"""Date and time helpers bound to the configured application timezone."""

from .datetime import (
    configure_app_timezone,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
)

__all__ = [
    "configure_app_timezone",
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
]
