"""
Booking conflict detection.

Two active bookings for the same photographer conflict when they share an
event date and their half-open ``[start, end)`` intervals intersect.
Back-to-back bookings (one ends at 12:00, the next starts at 12:00) do not
conflict. Intervals never wrap past midnight.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from lenslink.errors import SchedulingConflictError
from lenslink.schemas import Booking, BookingStatus
from lenslink.utils import time_to_minutes

logger = logging.getLogger(__name__)

ACTIVE_STATUSES: frozenset[BookingStatus] = frozenset({
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.IN_PROGRESS,
})


def is_active(booking: Booking) -> bool:
    return booking.status in ACTIVE_STATUSES


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval intersection on minutes after midnight."""
    return start_a < end_b and start_b < end_a


def find_conflicts(
    bookings: Iterable[Booking],
    photographer_id: str,
    event_date: date,
    start_time: str,
    end_time: str,
    exclude_booking_id: Optional[str] = None,
) -> list[Booking]:
    """Return every active booking that overlaps the proposed slot."""
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    conflicts = []
    for booking in bookings:
        if booking.id == exclude_booking_id:
            continue
        if booking.photographer_id != photographer_id or booking.event_date != event_date:
            continue
        if not is_active(booking):
            continue
        if intervals_overlap(
            start, end, time_to_minutes(booking.start_time), time_to_minutes(booking.end_time)
        ):
            conflicts.append(booking)
    return conflicts


def ensure_no_conflict(
    bookings: Iterable[Booking],
    photographer_id: str,
    event_date: date,
    start_time: str,
    end_time: str,
    exclude_booking_id: Optional[str] = None,
) -> None:
    """
    Reject a proposed slot that overlaps an active booking.

    Raises:
        SchedulingConflictError: Naming the first overlapping booking.
    """
    conflicts = find_conflicts(
        bookings, photographer_id, event_date, start_time, end_time, exclude_booking_id
    )
    if conflicts:
        clash = conflicts[0]
        logger.info(
            "Slot %s %s-%s for %s conflicts with %s (%s-%s)",
            event_date.isoformat(), start_time, end_time, photographer_id,
            clash.id, clash.start_time, clash.end_time,
        )
        raise SchedulingConflictError(
            f"Photographer is already booked on {event_date.isoformat()} "
            f"from {clash.start_time} to {clash.end_time}",
            conflicting_booking_id=clash.id,
        )
