"""
Offline console demo: walks booking scenarios against the in-memory store.

Uses the real services, state machine, conflict detector and fee
schedule with a frozen clock and a console notification sender. No
network, no database. Designed for live demo walkthroughs.

Usage:
    python console_demo.py
    python console_demo.py --scenario cancel
    python console_demo.py --scenario reassign
"""

import argparse
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable

from lenslink.clock import FrozenClock
from lenslink.config import NotificationConfig, settings
from lenslink.errors import LensLinkError
from lenslink.logging_context import set_request_id
from lenslink.notifications import NotificationKind, Notifier, render
from lenslink.schemas import (
    BookingRequest,
    BookingStatus,
    DayAvailability,
    Location,
    WeeklyAvailability,
)
from lenslink.services import (
    AdminService,
    BookingService,
    PhotographerService,
    UserService,
)
from lenslink.store import MemoryStore

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class ConsoleSender:
    """Prints notification subjects inline with the demo output."""

    def send(self, recipient: str, kind: NotificationKind, payload: dict[str, Any]) -> None:
        subject, _ = render(kind, payload)
        print(f"{DIM}  @@ {recipient}: {subject}{RESET}")


class ConsoleSession:
    """Seeds a small marketplace and replays scripted booking scenarios."""

    def __init__(self) -> None:
        self.store = MemoryStore()
        self.clock = FrozenClock(DEMO_NOW)
        notifier = Notifier(
            sender=ConsoleSender(),
            config=NotificationConfig(async_dispatch=False),
        )
        self.users = UserService(self.store, self.clock, notifier)
        self.photographers = PhotographerService(self.store, self.clock, notifier)
        self.bookings = BookingService(self.store, self.clock, notifier)
        self.admin = AdminService(self.store, self.clock, notifier, bookings=self.bookings)
        self._seed()

    def _seed(self) -> None:
        weekdays = DayAvailability(available=True, time_slots=["09:00-12:00", "13:00-18:00"])
        week = WeeklyAvailability(
            monday=weekdays, tuesday=weekdays, wednesday=weekdays,
            thursday=weekdays, friday=weekdays,
            saturday=DayAvailability(available=True, time_slots=["10:00-16:00"]),
        )
        self.client = self.users.register_user("Ava Client", "ava@example.com")
        self.admin_user = self.users.register_user("Sam Admin", "sam@example.com", role="admin")
        ph_users = [
            self.users.register_user("Noor Lens", "noor@example.com", role="photographer"),
            self.users.register_user("Kai Shutter", "kai@example.com", role="photographer"),
        ]
        self.ph_a = self.photographers.create_profile(
            ph_users[0].id, "Noor Lens Studio", specialties=["weddings"],
            hourly_rate=150, availability=week,
        )
        self.ph_b = self.photographers.create_profile(
            ph_users[1].id, "Shutter & Co", specialties=["events", "portraits"],
            hourly_rate=120, availability=week,
        )
        self.ph_a_user = ph_users[0]

    def say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[LensLink]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def step(self, label: str, action: Callable[[], Any]) -> Any:
        print(f"\n{BLUE}{BOLD}> {label}{RESET}")
        try:
            result = action()
        except LensLinkError as exc:
            print(f"{RED}  x {type(exc).__name__}: {exc}{RESET}")
            return None
        return result

    def _book(self, day: date, start: str, end: str, total: float = 1000.0):
        return self.bookings.create_booking(
            self.client.id, self.ph_a.id, day, start, end,
            BookingRequest(
                event_type="wedding",
                location=Location(venue="Harbour Hall", address="1 Pier St", city="Sydney"),
                total_amount=total,
            ),
        )

    def _next_weekday(self, days_out: int) -> date:
        day = DEMO_NOW.date() + timedelta(days=days_out)
        while day.weekday() == 6:
            day += timedelta(days=1)
        return day

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    def scenario_booking(self) -> None:
        day = self._next_weekday(10)
        self.say(f"Booking {self.ph_a.business_name} on {day.isoformat()}")
        slots = self.bookings.get_available_slots(self.ph_a.id, day)
        self.system_log(f"Declared slots: {slots}")

        first = self.step("Book 10:00-12:00", lambda: self._book(day, "10:00", "12:00"))
        if first:
            self.system_log(f"Created {first.id} ({first.status.value}, {first.duration:g}h)")
        self.step("Book 11:00-13:00 (overlaps)", lambda: self._book(day, "11:00", "13:00"))
        third = self.step("Book 12:00-13:00 (back-to-back)", lambda: self._book(day, "12:00", "13:00"))
        if third:
            self.system_log(f"Created {third.id}")
        self.step("Book on a Sunday", lambda: self._book(
            day + timedelta(days=(6 - day.weekday()) % 7 or 7), "10:00", "12:00"
        ))
        if not first:
            return

        for target in (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED):
            booking = self.step(
                f"Photographer moves booking to {target.value}",
                lambda t=target: self.bookings.transition_status(first.id, self.ph_a_user.id, t),
            )
            if booking:
                self.system_log(f"Status now {booking.status.value}")

        self.step("Confirm a completed booking", lambda: self.bookings.transition_status(
            first.id, self.ph_a_user.id, BookingStatus.CONFIRMED
        ))
        self.step("Client leaves a 5-star review", lambda: self.bookings.add_review(
            first.id, self.client.id, 5, "Wonderful day"
        ))
        self.step("Client reviews again", lambda: self.bookings.add_review(
            first.id, self.client.id, 4
        ))
        profile = self.photographers.get_profile(self.ph_a.id)
        self.say(f"Rating: {profile.rating.average} ({profile.rating.count} review)")

    def scenario_cancel(self) -> None:
        self.say("Cancellation fee schedule on a 1000.00 booking")
        for days_out in (5, 15, 45):
            day = self._next_weekday(days_out)
            booking = self.step(f"Book {day.isoformat()}", lambda d=day: self._book(d, "14:00", "16:00"))
            if not booking:
                continue
            result = self.step("Client cancels", lambda b=booking: self.bookings.cancel_booking(
                b.id, self.client.id, "Change of plans"
            ))
            if result:
                self.system_log(f"fee={result.fee:.2f} refund={result.refund:.2f}")

        tomorrow = self._next_weekday(1)
        late = self.step("Book tomorrow", lambda: self._book(tomorrow, "10:00", "11:00"))
        if late:
            self.step("Cancel inside the window", lambda: self.bookings.cancel_booking(
                late.id, self.client.id
            ))

    def scenario_reassign(self) -> None:
        day = self._next_weekday(20)
        booking = self.step("Book 10:00-12:00", lambda: self._book(day, "10:00", "12:00"))
        if not booking:
            return
        updated = self.step(
            f"Admin reassigns to {self.ph_b.business_name}",
            lambda: self.admin.reassign_photographer(
                self.admin_user.id, booking.id, self.ph_b.id, "Original photographer is ill"
            ),
        )
        if updated:
            for entry in updated.reassignment_history:
                self.system_log(
                    f"{entry.previous_photographer} -> {entry.new_photographer}: {entry.reason}"
                )
        stats = self.admin.dashboard_stats(self.admin_user.id)
        self.say(f"Bookings by status: {stats.bookings_by_status}")

    SCENARIOS: dict[str, str] = {
        "booking": "scenario_booking",
        "cancel": "scenario_cancel",
        "reassign": "scenario_reassign",
    }

    def run_scenario(self, name: str) -> None:
        if name not in self.SCENARIOS:
            raise ValueError(
                f"Unknown scenario {name!r}; expected one of {sorted(self.SCENARIOS)}"
            )
        set_request_id(f"DEMO-{name.upper()}")
        print(f"{YELLOW}{BOLD}=== {settings.app_name} demo: {name} ==={RESET}")
        self.system_log(f"Clock frozen at {self.clock.now().isoformat()}")
        getattr(self, self.SCENARIOS[name])()

    def run(self) -> None:
        for name in self.SCENARIOS:
            self.run_scenario(name)
            print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=list(ConsoleSession.SCENARIOS),
        default=None,
        help="Play a single scenario instead of all of them",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
