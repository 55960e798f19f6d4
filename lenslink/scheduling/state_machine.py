"""
Finite state machine for the booking lifecycle.

Every permitted status change is listed in an explicit transition table
together with the actor roles allowed to make it. Anything not in the
table is rejected, which makes terminal states terminal by construction.

Usage:
    sm = BookingStateMachine()
    sm.validate(BookingStatus.PENDING, BookingStatus.CONFIRMED, ActorRole.PHOTOGRAPHER)
    sm.apply(booking, BookingStatus.CONFIRMED, now)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from lenslink.errors import InvalidTransitionError, UnauthorizedError
from lenslink.schemas import Booking, BookingStatus

logger = logging.getLogger(__name__)


class ActorRole(str, Enum):
    """How the acting user relates to a particular booking."""
    CLIENT = "client"
    PHOTOGRAPHER = "photographer"
    ADMIN = "admin"
    OUTSIDER = "outsider"


PHOTOGRAPHER_OR_ADMIN = frozenset({ActorRole.PHOTOGRAPHER, ActorRole.ADMIN})
ANY_PARTY = frozenset({ActorRole.CLIENT, ActorRole.PHOTOGRAPHER, ActorRole.ADMIN})

TERMINAL_STATES: frozenset[BookingStatus] = frozenset({
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED,
    BookingStatus.REJECTED,
    BookingStatus.REFUNDED,
})


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_state: BookingStatus
    to_state: BookingStatus
    actors: frozenset[ActorRole]


class BookingStateMachine:
    """
    Validates and applies booking status changes.

    The machine holds no booking state of its own; the current status
    always comes from the stored booking.
    """

    TRANSITIONS: list[Transition] = [
        # --- Photographer decision ---
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, PHOTOGRAPHER_OR_ADMIN),
        Transition(BookingStatus.PENDING, BookingStatus.REJECTED, PHOTOGRAPHER_OR_ADMIN),

        # --- Shoot progress ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS, PHOTOGRAPHER_OR_ADMIN),
        Transition(BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED, PHOTOGRAPHER_OR_ADMIN),

        # --- Cancellation (window checked by the caller) ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, ANY_PARTY),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, ANY_PARTY),
    ]

    def find(self, current: BookingStatus, target: BookingStatus) -> Optional[Transition]:
        for t in self.TRANSITIONS:
            if t.from_state == current and t.to_state == target:
                return t
        return None

    def validate(
        self, current: BookingStatus, target: BookingStatus, actor: ActorRole
    ) -> Transition:
        """
        Check that ``actor`` may move a booking from ``current`` to ``target``.

        Raises:
            InvalidTransitionError: If the table has no such transition.
            UnauthorizedError: If the transition exists but not for this actor.
        """
        transition = self.find(current, target)
        if transition is None:
            valid = [s.value for s in self.get_valid_targets(current)]
            raise InvalidTransitionError(
                current.value,
                target.value,
                f"No valid transition from '{current.value}' to '{target.value}'. "
                f"Valid targets: {valid}",
            )
        if actor not in transition.actors:
            raise UnauthorizedError(
                f"A {actor.value} cannot move a booking from "
                f"'{current.value}' to '{target.value}'"
            )
        return transition

    def apply(
        self,
        booking: Booking,
        target: BookingStatus,
        now: datetime,
        reason: Optional[str] = None,
    ) -> None:
        """Set the new status and stamp the timestamp it produces."""
        old_status = booking.status
        booking.status = target
        if target == BookingStatus.COMPLETED:
            booking.completed_at = now
        elif target == BookingStatus.CANCELLED:
            booking.cancellation_date = now
            if reason:
                booking.cancellation_reason = reason
        logger.debug(
            "Booking %s status: %s -> %s", booking.id, old_status.value, target.value
        )

    def get_valid_targets(
        self, current: BookingStatus, actor: Optional[ActorRole] = None
    ) -> list[BookingStatus]:
        """Statuses reachable from ``current``, optionally for one actor."""
        return [
            t.to_state
            for t in self.TRANSITIONS
            if t.from_state == current and (actor is None or actor in t.actors)
        ]

    @staticmethod
    def is_terminal(status: BookingStatus) -> bool:
        return status in TERMINAL_STATES
