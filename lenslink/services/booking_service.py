"""
Booking lifecycle operations.

Booking requests flow through input validation, the availability
resolver and the conflict detector before a ``pending`` booking is
written. Status changes go through ``BookingStateMachine``; cancellation
adds the window check and the fee schedule; reassignment writes to the
ledger.

Every mutation is a single ``store.bookings.update`` whose mutator
re-validates against the stored document, so a rejected request leaves
the record untouched. Check-then-write sequences that read other
bookings (create, modify, reassign) are serialised per photographer.
"""

import threading
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator, Optional

from lenslink.clock import Clock
from lenslink.config import BookingPolicyConfig, settings
from lenslink.errors import (
    InvalidTransitionError,
    NotFoundError,
    SchedulingConflictError,
    UnauthorizedError,
    ValidationError,
    WindowClosedError,
)
from lenslink.logging_context import get_request_logger
from lenslink.notifications import NotificationKind, Notifier
from lenslink.schemas import (
    Booking,
    BookingRequest,
    BookingReview,
    BookingStatus,
    BookingUpdate,
    CancellationResult,
    Message,
    PackageSelection,
    PaymentStatus,
    Photographer,
    PhotographerReview,
    User,
    UserRole,
)
from lenslink.scheduling.availability import get_available_slots, is_available_on
from lenslink.scheduling.conflicts import ensure_no_conflict, is_active
from lenslink.scheduling.ledger import record_reassignment
from lenslink.scheduling.policy import (
    EDITABLE_STATUSES,
    compute_cancellation,
    hours_until_start,
)
from lenslink.scheduling.state_machine import ActorRole, BookingStateMachine
from lenslink.scheduling.validation import (
    MAX_CANCELLATION_REASON_LENGTH,
    MAX_MESSAGE_LENGTH,
    MAX_REVIEW_COMMENT_LENGTH,
    MAX_SPECIAL_REQUESTS_LENGTH,
    compute_duration,
    validate_amount,
    validate_event_date,
    validate_event_type,
    validate_guest_count,
    validate_location,
    validate_rating,
    validate_text,
    validate_time,
)
from lenslink.services.base import BaseService, Page, paginate
from lenslink.services.photographer_service import append_review
from lenslink.store import EntityStore
from lenslink.utils import new_id

logger = get_request_logger(__name__)

STATUS_NOTIFICATIONS: dict[BookingStatus, NotificationKind] = {
    BookingStatus.CONFIRMED: NotificationKind.BOOKING_CONFIRMED,
    BookingStatus.REJECTED: NotificationKind.BOOKING_REJECTED,
    BookingStatus.COMPLETED: NotificationKind.BOOKING_COMPLETED,
}


def _parse_status(value: Any) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid booking status: {value!r}", field="status") from None


def _payment_status(total: float, advance: float) -> PaymentStatus:
    if advance <= 0:
        return PaymentStatus.PENDING
    if advance >= total:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIAL


def _booking_payload(booking: Booking, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "booking_id": booking.id,
        "event_type": booking.event_type.value,
        "event_date": booking.event_date.isoformat(),
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "venue": booking.location.venue,
        "total_amount": f"{booking.total_amount:.2f}",
    }
    payload.update(extra)
    return payload


class BookingService(BaseService):
    """Create, change and query bookings."""

    def __init__(
        self,
        store: EntityStore,
        clock: Optional[Clock] = None,
        notifier: Optional[Notifier] = None,
        policy: Optional[BookingPolicyConfig] = None,
    ) -> None:
        super().__init__(store, clock, notifier)
        self.policy = policy or settings.policy
        self.state_machine = BookingStateMachine()
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # --- helpers ---

    @contextmanager
    def _photographer_lock(self, photographer_id: str) -> Iterator[None]:
        """Serialise check-then-write sequences for one photographer."""
        with self._locks_guard:
            lock = self._locks.setdefault(photographer_id, threading.Lock())
        with lock:
            yield

    def _require_active_photographer(self, photographer_id: str) -> Photographer:
        photographer = self.store.photographers.require(photographer_id)
        if not photographer.is_active:
            # inactive profiles are hidden from clients entirely
            raise NotFoundError("Photographer", photographer_id)
        return photographer

    def _actor_role(self, booking: Booking, actor: User) -> ActorRole:
        """How ``actor`` relates to ``booking``. Admin outranks ownership."""
        if actor.role == UserRole.ADMIN:
            return ActorRole.ADMIN
        if booking.client_id == actor.id:
            return ActorRole.CLIENT
        photographer = self.store.photographers.get(booking.photographer_id)
        if photographer is not None and photographer.user_id == actor.id:
            return ActorRole.PHOTOGRAPHER
        return ActorRole.OUTSIDER

    def _photographer_user_id(self, photographer_id: str) -> Optional[str]:
        photographer = self.store.photographers.get(photographer_id)
        return photographer.user_id if photographer else None

    def _check_bookable(
        self,
        photographer: Photographer,
        event_date: date,
        start_time: str,
        end_time: str,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        """Weekday availability, then overlap with active bookings."""
        if not is_available_on(photographer.availability, event_date):
            raise SchedulingConflictError(
                f"Photographer is not available on {event_date.strftime('%A')}s"
            )
        ensure_no_conflict(
            self.store.bookings.find(
                lambda b: b.photographer_id == photographer.id and b.event_date == event_date
            ),
            photographer.id,
            event_date,
            start_time,
            end_time,
            exclude_booking_id=exclude_booking_id,
        )

    def _notify_parties(
        self,
        booking: Booking,
        kind: NotificationKind,
        exclude_user_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        """Send ``kind`` to the client and the assigned photographer, minus the actor."""
        client_name = self.user_name(booking.client_id)
        photographer = self.store.photographers.get(booking.photographer_id)
        photographer_name = photographer.business_name if photographer else ""
        recipients = [(booking.client_id, client_name)]
        if photographer is not None:
            recipients.append((photographer.user_id, photographer_name))
        for user_id, name in recipients:
            if user_id == exclude_user_id:
                continue
            self.notifier.dispatch(
                self.user_email(user_id),
                kind,
                _booking_payload(
                    booking,
                    recipient_name=name,
                    client_name=client_name,
                    photographer_name=photographer_name,
                    **extra,
                ),
            )

    # --- creation ---

    def create_booking(
        self,
        client_id: str,
        photographer_id: str,
        event_date: date,
        start_time: str,
        end_time: str,
        details: BookingRequest,
    ) -> Booking:
        """
        Create a ``pending`` booking.

        Raises:
            ValidationError: Malformed input, past date or bad duration.
            NotFoundError: Unknown client or photographer.
            UnauthorizedError: The client account is deactivated or not a client.
            SchedulingConflictError: Weekday unavailable or slot overlaps.
        """
        client = self.require_active_user(client_id)
        if client.role != UserRole.CLIENT:
            raise UnauthorizedError("Only client accounts can create bookings")

        start_time = validate_time(start_time, "start_time")
        end_time = validate_time(end_time, "end_time")
        duration = compute_duration(start_time, end_time, self.policy)
        now = self.clock.now()
        event_date = validate_event_date(event_date, now)
        event_type = validate_event_type(details.event_type)
        location = validate_location(details.location)
        special_requests = validate_text(
            details.special_requests, "special_requests", MAX_SPECIAL_REQUESTS_LENGTH
        )
        guest_count = validate_guest_count(details.guest_count)

        photographer = self._require_active_photographer(photographer_id)

        package: Optional[PackageSelection] = None
        if details.package_id:
            deal = photographer.find_package(details.package_id)
            if deal is None:
                raise ValidationError(
                    f"Package {details.package_id} not offered by this photographer",
                    field="package_id",
                )
            package = PackageSelection(name=deal.name, price=deal.price, includes=deal.includes)
            total = deal.price
        elif details.total_amount is not None:
            total = validate_amount(details.total_amount, "total_amount")
        else:
            total = round(photographer.hourly_rate * duration, 2)
        advance = validate_amount(details.advance_amount, "advance_amount")
        if advance > total:
            raise ValidationError(
                "Advance amount cannot exceed the total amount", field="advance_amount"
            )

        with self._photographer_lock(photographer.id):
            self._check_bookable(photographer, event_date, start_time, end_time)
            booking = self.store.bookings.add(Booking(
                id=new_id("BK"),
                client_id=client.id,
                photographer_id=photographer.id,
                event_type=event_type,
                event_date=event_date,
                start_time=start_time,
                end_time=end_time,
                duration=duration,
                location=location,
                package=package,
                total_amount=total,
                advance_amount=advance,
                payment_status=_payment_status(total, advance),
                special_requests=special_requests,
                guest_count=guest_count,
                created_at=now,
                updated_at=now,
            ))

        logger.info(
            "Booking created: %s for %s on %s %s-%s",
            booking.id, photographer.id, event_date.isoformat(), start_time, end_time,
        )
        self.notifier.dispatch(
            self.user_email(photographer.user_id),
            NotificationKind.BOOKING_CREATED,
            _booking_payload(
                booking, recipient_name=photographer.business_name, client_name=client.name
            ),
        )
        return booking

    # --- lifecycle ---

    def transition_status(
        self,
        booking_id: str,
        actor_id: str,
        target_status: Any,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Move a booking to ``target_status``.

        Cancellation is routed through ``cancel_booking`` so the window and
        fee schedule always apply.

        Raises:
            InvalidTransitionError: No such transition from the current status.
            UnauthorizedError: The actor may not make this transition.
        """
        target = _parse_status(target_status)
        if target == BookingStatus.CANCELLED:
            return self.cancel_booking(booking_id, actor_id, reason).booking

        actor = self.require_active_user(actor_id)
        role = self._actor_role(self.store.bookings.require(booking_id), actor)
        now = self.clock.now()

        def mutate(b: Booking) -> None:
            self.state_machine.validate(b.status, target, role)
            self.state_machine.apply(b, target, now)

        booking = self.store.bookings.update(booking_id, mutate, now=now)
        logger.info("Booking %s -> %s by %s (%s)", booking_id, target.value, actor_id, role.value)

        kind = STATUS_NOTIFICATIONS.get(target)
        if kind is not None:
            self._notify_parties(booking, kind, exclude_user_id=actor.id)
        return booking

    def cancel_booking(
        self, booking_id: str, actor_id: str, reason: Optional[str] = None
    ) -> CancellationResult:
        """
        Cancel a pending or confirmed booking and settle the fee.

        Raises:
            InvalidTransitionError: The booking is not pending or confirmed.
            UnauthorizedError: The actor is not a party to the booking.
            WindowClosedError: The scheduled start is inside the cancellation window.
        """
        actor = self.require_active_user(actor_id)
        role = self._actor_role(self.store.bookings.require(booking_id), actor)
        reason = validate_text(reason, "reason", MAX_CANCELLATION_REASON_LENGTH)
        now = self.clock.now()
        window = self.policy.cancellation_window_hours

        def mutate(b: Booking) -> None:
            self.state_machine.validate(b.status, BookingStatus.CANCELLED, role)
            if hours_until_start(b, now) <= window:
                raise WindowClosedError(
                    f"Bookings can only be cancelled more than {window:g} hours before the event"
                )
            fee, refund = compute_cancellation(b.total_amount, b.event_date, now, self.policy)
            self.state_machine.apply(b, BookingStatus.CANCELLED, now, reason)
            b.cancelled_by = actor.id
            b.cancellation_fee = fee
            b.refund_amount = refund

        booking = self.store.bookings.update(booking_id, mutate, now=now)
        logger.info(
            "Booking %s cancelled by %s: fee=%.2f refund=%.2f",
            booking_id, actor_id, booking.cancellation_fee, booking.refund_amount,
        )
        self._notify_parties(
            booking,
            NotificationKind.BOOKING_CANCELLED,
            exclude_user_id=actor.id,
            fee=f"{booking.cancellation_fee:.2f}",
            refund=f"{booking.refund_amount:.2f}",
            reason=booking.cancellation_reason,
        )
        return CancellationResult(
            booking=booking, fee=booking.cancellation_fee, refund=booking.refund_amount
        )

    def modify_booking(self, booking_id: str, actor_id: str, changes: BookingUpdate) -> Booking:
        """
        Edit date, time, location or amount while the modification window is open.

        Raises:
            UnauthorizedError: The actor is neither the client nor an admin.
            InvalidTransitionError: The booking is not pending or confirmed.
            WindowClosedError: The scheduled start is inside the modification window.
            SchedulingConflictError: The new slot is unavailable or overlaps.
        """
        actor = self.require_active_user(actor_id)
        current = self.store.bookings.require(booking_id)
        role = self._actor_role(current, actor)
        if role not in (ActorRole.CLIENT, ActorRole.ADMIN):
            raise UnauthorizedError("Only the client or an admin can modify a booking")

        now = self.clock.now()
        window = self.policy.modification_window_hours

        def check_editable(b: Booking) -> None:
            if b.status not in EDITABLE_STATUSES:
                raise InvalidTransitionError(
                    b.status.value, b.status.value,
                    f"Bookings in status '{b.status.value}' cannot be modified",
                )
            if hours_until_start(b, now) <= window:
                raise WindowClosedError(
                    f"Bookings can only be modified more than {window:g} hours before the event"
                )

        check_editable(current)

        fields = changes.model_fields_set
        event_date = (
            validate_event_date(changes.event_date, now)
            if "event_date" in fields and changes.event_date is not None
            else current.event_date
        )
        start_time = (
            validate_time(changes.start_time, "start_time")
            if "start_time" in fields and changes.start_time is not None
            else current.start_time
        )
        end_time = (
            validate_time(changes.end_time, "end_time")
            if "end_time" in fields and changes.end_time is not None
            else current.end_time
        )
        duration = compute_duration(start_time, end_time, self.policy)

        updates: dict[str, Any] = {
            "event_date": event_date,
            "start_time": start_time,
            "end_time": end_time,
            "duration": duration,
        }
        if changes.location is not None:
            updates["location"] = validate_location(changes.location)
        if changes.event_type is not None:
            updates["event_type"] = validate_event_type(changes.event_type)
        if "special_requests" in fields:
            updates["special_requests"] = validate_text(
                changes.special_requests, "special_requests", MAX_SPECIAL_REQUESTS_LENGTH
            )
        if "guest_count" in fields:
            updates["guest_count"] = validate_guest_count(changes.guest_count)
        if changes.total_amount is not None:
            total = validate_amount(changes.total_amount, "total_amount")
            if current.advance_amount > total:
                raise ValidationError(
                    "Total amount cannot be less than the advance paid", field="total_amount"
                )
            updates["total_amount"] = total
            updates["payment_status"] = _payment_status(total, current.advance_amount)

        reschedule = (event_date, start_time, end_time) != (
            current.event_date, current.start_time, current.end_time
        )

        def mutate(b: Booking) -> None:
            check_editable(b)
            if reschedule and b.photographer_id != current.photographer_id:
                # reassigned after the availability check ran against the old calendar
                raise SchedulingConflictError(
                    "Booking was reassigned while being modified; retry the change"
                )
            for key, value in updates.items():
                setattr(b, key, value)

        if reschedule:
            photographer = self.store.photographers.require(current.photographer_id)
            with self._photographer_lock(photographer.id):
                self._check_bookable(
                    photographer, event_date, start_time, end_time, exclude_booking_id=booking_id
                )
                booking = self.store.bookings.update(booking_id, mutate, now=now)
        else:
            booking = self.store.bookings.update(booking_id, mutate, now=now)

        logger.info("Booking %s modified by %s: %s", booking_id, actor_id, sorted(updates))
        return booking

    def reassign_photographer(
        self,
        booking_id: str,
        admin_id: str,
        new_photographer_id: str,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Hand a booking to another photographer and record it in the ledger.

        The booking status is left as it is. Active bookings are checked
        for conflicts against the new photographer's calendar.
        """
        admin = self.require_admin(admin_id)
        current = self.store.bookings.require(booking_id)
        if current.photographer_id == new_photographer_id:
            raise ValidationError(
                "Booking is already assigned to this photographer", field="new_photographer_id"
            )
        photographer = self._require_active_photographer(new_photographer_id)
        reason = validate_text(reason, "reason", MAX_CANCELLATION_REASON_LENGTH)
        now = self.clock.now()

        def mutate(b: Booking) -> None:
            record_reassignment(b, photographer.id, admin.id, now, reason)

        with self._photographer_lock(photographer.id):
            if is_active(current):
                ensure_no_conflict(
                    self.store.bookings.find(lambda b: b.photographer_id == photographer.id),
                    photographer.id,
                    current.event_date,
                    current.start_time,
                    current.end_time,
                    exclude_booking_id=booking_id,
                )
            booking = self.store.bookings.update(booking_id, mutate, now=now)

        logger.info(
            "Booking %s reassigned %s -> %s by %s",
            booking_id, current.photographer_id, photographer.id, admin.id,
        )
        self._notify_parties(
            booking,
            NotificationKind.PHOTOGRAPHER_REASSIGNED,
            reason=booking.reassignment_history[-1].reason,
        )
        return booking

    # --- availability ---

    def get_available_slots(self, photographer_id: str, day: date) -> list[str]:
        """Declared slots for the weekday of ``day``; empty when the day is off."""
        photographer = self.store.photographers.require(photographer_id)
        return get_available_slots(photographer.availability, day)

    # --- communication ---

    def _require_party(self, booking: Booking, user_id: str) -> User:
        user = self.require_active_user(user_id)
        if user.id not in (booking.client_id, self._photographer_user_id(booking.photographer_id)):
            raise UnauthorizedError("Only the client and the assigned photographer can message")
        return user

    def add_message(self, booking_id: str, sender_id: str, message: str) -> Booking:
        booking = self.store.bookings.require(booking_id)
        sender = self._require_party(booking, sender_id)
        text = validate_text(message, "message", MAX_MESSAGE_LENGTH, required=True)
        entry = Message(sender_id=sender.id, message=text, timestamp=self.clock.now())

        def mutate(b: Booking) -> None:
            b.communication.append(entry)

        logger.debug("Message on booking %s from %s", booking_id, sender_id)
        return self.store.bookings.update(booking_id, mutate, now=self.clock.now())

    def mark_messages_read(self, booking_id: str, reader_id: str) -> Booking:
        """Mark every message the reader did not send as read."""
        booking = self.store.bookings.require(booking_id)
        reader = self._require_party(booking, reader_id)

        def mutate(b: Booking) -> None:
            for msg in b.communication:
                if msg.sender_id != reader.id:
                    msg.is_read = True

        return self.store.bookings.update(booking_id, mutate, now=self.clock.now())

    # --- reviews ---

    def add_review(
        self,
        booking_id: str,
        client_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Booking:
        """
        Attach the single review a completed booking may carry.

        The review is mirrored onto the photographer profile, whose
        aggregate rating is recomputed.

        Raises:
            UnauthorizedError: The reviewer is not the booking's client.
            ValidationError: The booking is not completed or already reviewed.
        """
        client = self.require_active_user(client_id)
        booking = self.store.bookings.require(booking_id)
        if booking.client_id != client.id:
            raise UnauthorizedError("Only the booking's client can review it")
        rating = validate_rating(rating)
        comment = validate_text(comment, "comment", MAX_REVIEW_COMMENT_LENGTH)
        now = self.clock.now()

        def mutate(b: Booking) -> None:
            if b.status != BookingStatus.COMPLETED:
                raise ValidationError("Only completed bookings can be reviewed", field="status")
            if b.review is not None:
                raise ValidationError("This booking has already been reviewed", field="review")
            b.review = BookingReview(rating=rating, comment=comment, review_date=now)

        booking = self.store.bookings.update(booking_id, mutate, now=now)

        def mirror(p: Photographer) -> None:
            append_review(p, PhotographerReview(
                client_id=client.id,
                booking_id=booking.id,
                rating=rating,
                comment=comment,
                created_at=now,
            ))

        photographer = self.store.photographers.update(
            booking.photographer_id, mirror, now=now
        )
        logger.info(
            "Review %d/5 on booking %s; %s now %.1f (%d)",
            rating, booking_id, photographer.id, photographer.rating.average,
            photographer.rating.count,
        )
        self.notifier.dispatch(
            self.user_email(photographer.user_id),
            NotificationKind.REVIEW_RECEIVED,
            _booking_payload(booking, recipient_name=photographer.business_name, rating=rating),
        )
        return booking

    # --- queries ---

    def get_booking(self, booking_id: str, actor_id: str) -> Booking:
        actor = self.require_active_user(actor_id)
        booking = self.store.bookings.require(booking_id)
        if self._actor_role(booking, actor) == ActorRole.OUTSIDER:
            raise UnauthorizedError("Not authorized to view this booking")
        return booking

    def list_bookings(
        self,
        actor_id: str,
        status: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Booking]:
        """
        Bookings visible to the actor, newest event date first.

        Clients see their own bookings, photographers the bookings
        assigned to their profile, admins everything.
        """
        actor = self.require_active_user(actor_id)
        wanted = _parse_status(status) if status else None
        profile_id: Optional[str] = None
        if actor.role == UserRole.PHOTOGRAPHER:
            profile = self.store.photographers.find_one(lambda p: p.user_id == actor.id)
            profile_id = profile.id if profile else ""

        def visible(b: Booking) -> bool:
            if actor.role == UserRole.CLIENT and b.client_id != actor.id:
                return False
            if profile_id is not None and b.photographer_id != profile_id:
                return False
            if wanted is not None and b.status != wanted:
                return False
            if start is not None and b.event_date < start:
                return False
            if end is not None and b.event_date > end:
                return False
            return True

        results = self.store.bookings.find(visible)
        results.sort(key=lambda b: (b.event_date, b.start_time), reverse=True)
        return paginate(results, page, limit)
