"""Shared test fixtures and helpers."""

from datetime import date, datetime, timezone
from typing import Any, Optional

import pytest

from lenslink.clock import FrozenClock
from lenslink.config import NotificationConfig
from lenslink.notifications import NotificationKind, Notifier
from lenslink.schemas import (
    BookingRequest,
    DayAvailability,
    Location,
    WeeklyAvailability,
)
from lenslink.services import (
    AdminService,
    BookingService,
    FeedbackService,
    PhotographerService,
    UserService,
)
from lenslink.store import MemoryStore

# Monday 2026-10-19, noon UTC
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
EVENT_DAY = date(2026, 11, 4)  # Wednesday, 16 days out
SUNDAY = date(2026, 10, 25)


class RecordingSender:
    """Notification sender that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, NotificationKind, dict[str, Any]]] = []
        self.fail = False

    def send(self, recipient: str, kind: NotificationKind, payload: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("SMTP connection refused")
        self.sent.append((recipient, kind, payload))

    def of_kind(self, kind: NotificationKind) -> list[tuple[str, NotificationKind, dict[str, Any]]]:
        return [entry for entry in self.sent if entry[1] == kind]


def weekday_availability() -> WeeklyAvailability:
    """Monday to Saturday bookable; Sunday declared slots but switched off."""
    day = DayAvailability(available=True, time_slots=["09:00-12:00", "13:00-18:00"])
    return WeeklyAvailability(
        monday=day,
        tuesday=day,
        wednesday=day,
        thursday=day,
        friday=day,
        saturday=DayAvailability(available=True, time_slots=["10:00-16:00"]),
        sunday=DayAvailability(available=False, time_slots=["10:00-14:00"]),
    )


def make_request(
    total_amount: Optional[float] = 1000.0,
    event_type: str = "wedding",
    **kwargs: Any,
) -> BookingRequest:
    return BookingRequest(
        event_type=event_type,
        location=Location(venue="Harbour Hall", address="1 Pier St", city="Sydney"),
        total_amount=total_amount,
        **kwargs,
    )


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def notifier(sender):
    return Notifier(sender=sender, config=NotificationConfig(async_dispatch=False))


@pytest.fixture
def user_service(store, clock, notifier):
    return UserService(store, clock, notifier)


@pytest.fixture
def photographer_service(store, clock, notifier):
    return PhotographerService(store, clock, notifier)


@pytest.fixture
def booking_service(store, clock, notifier):
    return BookingService(store, clock, notifier)


@pytest.fixture
def admin_service(store, clock, notifier, booking_service):
    return AdminService(store, clock, notifier, bookings=booking_service)


@pytest.fixture
def feedback_service(store, clock, notifier):
    return FeedbackService(store, clock, notifier)


@pytest.fixture
def client(user_service):
    return user_service.register_user("Ava Client", "ava@example.com")


@pytest.fixture
def other_client(user_service):
    return user_service.register_user("Ben Client", "ben@example.com")


@pytest.fixture
def admin(user_service):
    return user_service.register_user("Sam Admin", "sam@example.com", role="admin")


@pytest.fixture
def photographer_user(user_service):
    return user_service.register_user("Noor Lens", "noor@example.com", role="photographer")


@pytest.fixture
def photographer(photographer_service, photographer_user):
    return photographer_service.create_profile(
        photographer_user.id,
        "Noor Lens Studio",
        specialties=["weddings", "portraits"],
        hourly_rate=150,
        availability=weekday_availability(),
    )


@pytest.fixture
def second_photographer_user(user_service):
    return user_service.register_user("Kai Shutter", "kai@example.com", role="photographer")


@pytest.fixture
def second_photographer(photographer_service, second_photographer_user):
    return photographer_service.create_profile(
        second_photographer_user.id,
        "Shutter & Co",
        specialties=["events"],
        hourly_rate=120,
        availability=weekday_availability(),
    )


@pytest.fixture
def book(booking_service, client, photographer):
    """Factory: create a booking for ``client`` with ``photographer``."""

    def _book(
        day: date = EVENT_DAY,
        start: str = "10:00",
        end: str = "12:00",
        total_amount: Optional[float] = 1000.0,
        client_id: Optional[str] = None,
        photographer_id: Optional[str] = None,
        **kwargs: Any,
    ):
        return booking_service.create_booking(
            client_id or client.id,
            photographer_id or photographer.id,
            day,
            start,
            end,
            make_request(total_amount=total_amount, **kwargs),
        )

    return _book
