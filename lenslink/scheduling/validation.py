"""
Explicit input validation for booking data.

Each check raises ``ValidationError`` naming the offending field, before
anything is written to the store.
"""

from datetime import date, datetime
from typing import Optional

from lenslink.config import BookingPolicyConfig, settings
from lenslink.errors import ValidationError
from lenslink.schemas import EventType, Location
from lenslink.scheduling.policy import event_day_start
from lenslink.utils import is_valid_time, normalize_time, time_to_minutes

MAX_SPECIAL_REQUESTS_LENGTH = 1000
MAX_MESSAGE_LENGTH = 1000
MAX_REVIEW_COMMENT_LENGTH = 500
MAX_CANCELLATION_REASON_LENGTH = 500
MAX_VENUE_LENGTH = 200
MAX_ADDRESS_LENGTH = 300
MAX_CITY_LENGTH = 50
MAX_GUEST_COUNT = 10000


def validate_time(value: Optional[str], field: str) -> str:
    """Return the zero-padded ``HH:MM`` form of a valid time string."""
    if not value or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    if not is_valid_time(value):
        raise ValidationError(
            f"Please provide a valid time in HH:MM format for {field}", field=field
        )
    return normalize_time(value)


def compute_duration(
    start_time: str, end_time: str, policy: Optional[BookingPolicyConfig] = None
) -> float:
    """Hours between start and end; must be positive and within policy bounds."""
    policy = policy or settings.policy
    minutes = time_to_minutes(end_time) - time_to_minutes(start_time)
    if minutes <= 0:
        raise ValidationError("End time must be after start time", field="end_time")
    duration = minutes / 60
    if duration < policy.min_duration_hours:
        raise ValidationError(
            f"Duration must be at least {policy.min_duration_hours:g} hours", field="end_time"
        )
    if duration > policy.max_duration_hours:
        raise ValidationError(
            f"Duration cannot exceed {policy.max_duration_hours:g} hours", field="end_time"
        )
    return duration


def validate_event_date(event_date: Optional[date], now: datetime) -> date:
    """The event date must lie strictly after ``now``."""
    if event_date is None:
        raise ValidationError("Event date is required", field="event_date")
    if isinstance(event_date, datetime):
        event_date = event_date.date()
    if event_day_start(event_date) <= now:
        raise ValidationError("Event date must be in the future", field="event_date")
    return event_date


def validate_event_type(value: Optional[str]) -> EventType:
    try:
        return EventType(value)
    except ValueError:
        raise ValidationError(f"Invalid event type: {value!r}", field="event_type") from None


def validate_location(location: Optional[Location]) -> Location:
    if location is None:
        raise ValidationError("Location is required", field="location")
    for name, value, limit in [
        ("venue", location.venue, MAX_VENUE_LENGTH),
        ("address", location.address, MAX_ADDRESS_LENGTH),
        ("city", location.city, MAX_CITY_LENGTH),
    ]:
        if not value or not value.strip():
            raise ValidationError(f"Location {name} is required", field=f"location.{name}")
        if len(value) > limit:
            raise ValidationError(
                f"Location {name} cannot exceed {limit} characters", field=f"location.{name}"
            )
    return location


def validate_amount(value: float, field: str) -> float:
    if value < 0:
        raise ValidationError(f"{field} cannot be negative", field=field)
    return float(value)


def validate_guest_count(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if not 1 <= value <= MAX_GUEST_COUNT:
        raise ValidationError(
            f"Guest count must be between 1 and {MAX_GUEST_COUNT}", field="guest_count"
        )
    return value


def validate_text(
    value: Optional[str], field: str, max_length: int, required: bool = False
) -> Optional[str]:
    if value is None or not value.strip():
        if required:
            raise ValidationError(f"{field} is required", field=field)
        return None
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{field} cannot exceed {max_length} characters", field=field)
    return value


def validate_rating(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError("Rating must be between 1 and 5", field="rating")
    return value
