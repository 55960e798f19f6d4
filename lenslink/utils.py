"""Shared utilities used across the booking core."""

import math
import re
import uuid

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


def new_id(prefix: str) -> str:
    """Generate an opaque entity identifier such as ``BK-3F9A01C2D4E5``."""
    return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"


def is_valid_time(value: str) -> bool:
    """Check a ``H:MM`` / ``HH:MM`` 24-hour clock string."""
    return bool(TIME_PATTERN.match(value.strip()))


def time_to_minutes(value: str) -> int:
    """Convert ``HH:MM`` into minutes after midnight.

    Examples:
        >>> time_to_minutes("09:30")
        570
        >>> time_to_minutes("0:05")
        5
    """
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def normalize_time(value: str) -> str:
    """Zero-pad a valid time string, e.g. ``9:00`` -> ``09:00``."""
    minutes = time_to_minutes(value)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_email(value: str) -> str:
    """Trim and lower-case an email address."""
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)
