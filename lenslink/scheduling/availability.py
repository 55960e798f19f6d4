"""
Weekly availability resolution.

Maps a calendar date onto a photographer's declared weekly availability.
The weekday table is Sunday-first and indexed by a Sunday-based day
number (0=Sunday .. 6=Saturday); ``date.weekday()`` is Monday-based and
must not be used to index it.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from lenslink.schemas import DayAvailability, WeeklyAvailability

logger = logging.getLogger(__name__)

WEEKDAY_KEYS: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


@dataclass(frozen=True)
class DayCapability:
    """What a photographer offers on one calendar date."""

    day_name: str
    available: bool
    time_slots: list[str] = field(default_factory=list)


def day_index(day: date) -> int:
    """Sunday-based day number: 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def day_key(day: date) -> str:
    """Weekday key into ``WeeklyAvailability`` for a calendar date."""
    return WEEKDAY_KEYS[day_index(day)]


def resolve_day(availability: WeeklyAvailability, day: date) -> DayCapability:
    """Look up the declared availability for ``day``.

    An unavailable day yields no slots, whatever ``time_slots`` holds.
    """
    name = day_key(day)
    declared: DayAvailability = getattr(availability, name)
    if not declared.available:
        return DayCapability(day_name=name, available=False)
    return DayCapability(day_name=name, available=True, time_slots=list(declared.time_slots))


def get_available_slots(availability: WeeklyAvailability, day: date) -> list[str]:
    """Declared time-slot strings for ``day``, or ``[]`` if the day is off."""
    capability = resolve_day(availability, day)
    logger.debug(
        "Availability for %s (%s): available=%s slots=%d",
        day.isoformat(), capability.day_name, capability.available, len(capability.time_slots),
    )
    return capability.time_slots


def is_available_on(availability: WeeklyAvailability, day: date) -> bool:
    return resolve_day(availability, day).available
