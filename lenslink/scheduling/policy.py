"""
Booking lead-time policy: cancellation and modification windows and the
cancellation fee schedule.

Event dates are calendar dates interpreted at UTC midnight. Windows are
measured against the scheduled start (event date plus start time); fee
tiers are measured in whole days against the event date itself.
"""

import logging
import math
from datetime import date, datetime, time, timezone
from typing import Optional

from lenslink.config import BookingPolicyConfig, settings
from lenslink.schemas import Booking, BookingStatus
from lenslink.utils import round_half_up, time_to_minutes

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600

EDITABLE_STATUSES: frozenset[BookingStatus] = frozenset({
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
})


def event_day_start(event_date: date) -> datetime:
    """UTC midnight at the beginning of the event date."""
    return datetime.combine(event_date, time(0, 0), tzinfo=timezone.utc)


def scheduled_start(event_date: date, start_time: str) -> datetime:
    minutes = time_to_minutes(start_time)
    return datetime.combine(
        event_date, time(minutes // 60, minutes % 60), tzinfo=timezone.utc
    )


def hours_until_start(booking: Booking, now: datetime) -> float:
    delta = scheduled_start(booking.event_date, booking.start_time) - now
    return delta.total_seconds() / SECONDS_PER_HOUR


def days_until_event(event_date: date, now: datetime) -> int:
    """Whole days until the event, rounded up: ``ceil((event - now) / 1 day)``."""
    delta = event_day_start(event_date) - now
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def cancellation_fee_rate(
    days_until: int, policy: Optional[BookingPolicyConfig] = None
) -> float:
    """Fraction of the total retained when cancelling ``days_until`` days out."""
    policy = policy or settings.policy
    if days_until < policy.short_notice_days:
        return policy.short_notice_fee_rate
    if days_until < policy.medium_notice_days:
        return policy.medium_notice_fee_rate
    return policy.long_notice_fee_rate


def compute_cancellation(
    total_amount: float,
    event_date: date,
    now: datetime,
    policy: Optional[BookingPolicyConfig] = None,
) -> tuple[float, float]:
    """
    Compute the cancellation fee and refund.

    Returns:
        (fee, refund) where fee is the rounded share of ``total_amount``
        and ``fee + refund == total_amount``.
    """
    days = days_until_event(event_date, now)
    rate = cancellation_fee_rate(days, policy)
    fee = float(round_half_up(total_amount * rate))
    refund = total_amount - fee
    logger.debug(
        "Cancellation %d day(s) out: rate=%.2f fee=%.2f refund=%.2f", days, rate, fee, refund
    )
    return fee, refund


def can_cancel(
    booking: Booking, now: datetime, policy: Optional[BookingPolicyConfig] = None
) -> bool:
    """Pending/confirmed and further away than the cancellation window."""
    policy = policy or settings.policy
    return (
        booking.status in EDITABLE_STATUSES
        and hours_until_start(booking, now) > policy.cancellation_window_hours
    )


def can_modify(
    booking: Booking, now: datetime, policy: Optional[BookingPolicyConfig] = None
) -> bool:
    """Pending/confirmed and further away than the modification window."""
    policy = policy or settings.policy
    return (
        booking.status in EDITABLE_STATUSES
        and hours_until_start(booking, now) > policy.modification_window_hours
    )
