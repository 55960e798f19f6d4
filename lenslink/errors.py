"""Typed errors raised by the booking core.

The route layer maps each class to a transport response; nothing in the
core retries or swallows these.
"""

from typing import Optional


class LensLinkError(Exception):
    """Base class for all booking-core errors."""


class ValidationError(LensLinkError):
    """Malformed input: bad time format, missing field, out-of-range value."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(LensLinkError):
    """A referenced user, photographer, booking or feedback record is absent."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class SchedulingConflictError(LensLinkError):
    """The requested slot overlaps an active booking or an unavailable day."""

    def __init__(self, message: str, conflicting_booking_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.conflicting_booking_id = conflicting_booking_id


class InvalidTransitionError(LensLinkError):
    """A status change not permitted from the booking's current state."""

    def __init__(self, from_status: str, to_status: str, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Cannot move booking from '{from_status}' to '{to_status}'"
        )
        self.from_status = from_status
        self.to_status = to_status


class WindowClosedError(LensLinkError):
    """Cancellation or modification requested too close to the event."""


class UnauthorizedError(LensLinkError):
    """The actor lacks the role or ownership required for the mutation."""
