"""Append-only reassignment history on a booking."""

import logging
from datetime import datetime
from typing import Optional

from lenslink.schemas import Booking, ReassignmentEntry

logger = logging.getLogger(__name__)

DEFAULT_REASSIGNMENT_REASON = "Admin reassignment"


def record_reassignment(
    booking: Booking,
    new_photographer_id: str,
    reassigned_by: str,
    now: datetime,
    reason: Optional[str] = None,
) -> ReassignmentEntry:
    """Push one ledger entry, then repoint the live photographer reference.

    Earlier entries are never touched and ``status`` is left as it is.
    """
    entry = ReassignmentEntry(
        previous_photographer=booking.photographer_id,
        new_photographer=new_photographer_id,
        reason=reason or DEFAULT_REASSIGNMENT_REASON,
        reassigned_at=now,
        reassigned_by=reassigned_by,
    )
    booking.reassignment_history.append(entry)
    booking.photographer_id = new_photographer_id
    logger.debug(
        "Booking %s reassigned %s -> %s (entry %d)",
        booking.id, entry.previous_photographer, new_photographer_id,
        len(booking.reassignment_history),
    )
    return entry


def reassignment_trail(booking: Booking) -> list[str]:
    """Ordered photographer ids the booking has been assigned to."""
    if not booking.reassignment_history:
        return [booking.photographer_id]
    trail = [booking.reassignment_history[0].previous_photographer]
    trail.extend(entry.new_photographer for entry in booking.reassignment_history)
    return trail
