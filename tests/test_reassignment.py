"""Tests for admin reassignment and the reassignment ledger."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from lenslink.errors import (
    NotFoundError,
    SchedulingConflictError,
    UnauthorizedError,
    ValidationError,
)
from lenslink.notifications import NotificationKind
from lenslink.schemas import BookingStatus
from lenslink.scheduling.ledger import (
    DEFAULT_REASSIGNMENT_REASON,
    record_reassignment,
    reassignment_trail,
)
from tests.conftest import NOW


class TestLedger:
    def test_entry_then_pointer(self, book, photographer, second_photographer, admin):
        booking = book()
        entry = record_reassignment(booking, second_photographer.id, admin.id, NOW, "Ill")
        assert entry.previous_photographer == photographer.id
        assert entry.new_photographer == second_photographer.id
        assert booking.photographer_id == second_photographer.id
        assert booking.reassignment_history == [entry]

    def test_default_reason(self, book, second_photographer, admin):
        booking = book()
        entry = record_reassignment(booking, second_photographer.id, admin.id, NOW)
        assert entry.reason == DEFAULT_REASSIGNMENT_REASON

    def test_entries_are_immutable(self, book, second_photographer, admin):
        booking = book()
        entry = record_reassignment(booking, second_photographer.id, admin.id, NOW)
        with pytest.raises(PydanticValidationError):
            entry.reason = "rewritten"

    def test_trail(self, book, photographer, second_photographer, admin):
        booking = book()
        assert reassignment_trail(booking) == [photographer.id]
        record_reassignment(booking, second_photographer.id, admin.id, NOW)
        record_reassignment(booking, photographer.id, admin.id, NOW)
        assert reassignment_trail(booking) == [
            photographer.id, second_photographer.id, photographer.id,
        ]


class TestReassignPhotographer:
    def test_appends_exactly_one_entry(
        self, book, admin_service, admin, photographer, second_photographer
    ):
        booking = book()
        updated = admin_service.reassign_photographer(
            admin.id, booking.id, second_photographer.id, "Original photographer is ill"
        )
        assert updated.photographer_id == second_photographer.id
        assert len(updated.reassignment_history) == 1
        entry = updated.reassignment_history[0]
        assert entry.previous_photographer == photographer.id
        assert entry.reassigned_by == admin.id
        assert entry.reassigned_at == NOW
        assert entry.reason == "Original photographer is ill"

    def test_prior_entries_unchanged(
        self, book, booking_service, admin, photographer, second_photographer
    ):
        booking = book()
        first = booking_service.reassign_photographer(
            booking.id, admin.id, second_photographer.id, "first"
        )
        second = booking_service.reassign_photographer(
            booking.id, admin.id, photographer.id, "second"
        )
        assert len(second.reassignment_history) == 2
        assert second.reassignment_history[0] == first.reassignment_history[0]
        assert second.photographer_id == photographer.id

    def test_status_is_untouched(
        self, book, booking_service, admin, photographer_user, second_photographer
    ):
        booking = book()
        booking_service.transition_status(booking.id, photographer_user.id, "confirmed")
        updated = booking_service.reassign_photographer(booking.id, admin.id, second_photographer.id)
        assert updated.status == BookingStatus.CONFIRMED

    def test_admin_only(self, book, booking_service, client, second_photographer):
        booking = book()
        with pytest.raises(UnauthorizedError):
            booking_service.reassign_photographer(booking.id, client.id, second_photographer.id)

    def test_unknown_photographer(self, book, booking_service, admin):
        booking = book()
        with pytest.raises(NotFoundError):
            booking_service.reassign_photographer(booking.id, admin.id, "PH-MISSING")

    def test_inactive_photographer(
        self, book, booking_service, admin_service, admin, second_photographer
    ):
        booking = book()
        admin_service.set_photographer_active(admin.id, second_photographer.id, False)
        with pytest.raises(NotFoundError):
            booking_service.reassign_photographer(booking.id, admin.id, second_photographer.id)

    def test_same_photographer(self, book, booking_service, admin, photographer):
        booking = book()
        with pytest.raises(ValidationError):
            booking_service.reassign_photographer(booking.id, admin.id, photographer.id)

    def test_conflict_on_new_photographer(
        self, book, booking_service, admin, store, photographer, second_photographer
    ):
        book(start="11:00", end="13:00", photographer_id=second_photographer.id)
        booking = book(start="10:00", end="12:00")
        with pytest.raises(SchedulingConflictError):
            booking_service.reassign_photographer(booking.id, admin.id, second_photographer.id)
        stored = store.bookings.get(booking.id)
        assert stored.photographer_id == photographer.id
        assert stored.reassignment_history == []

    def test_notifies_both_parties(
        self, book, booking_service, admin, sender, client, second_photographer_user,
        second_photographer,
    ):
        booking = book()
        booking_service.reassign_photographer(booking.id, admin.id, second_photographer.id)
        recipients = {r for r, _, _ in sender.of_kind(NotificationKind.PHOTOGRAPHER_REASSIGNED)}
        assert recipients == {client.email, second_photographer_user.email}
