"""
LensLink booking core entry point.

Builds the configured entity store and services, or runs the offline
console demo.

Usage:
    Console demo:   python main.py console [scenario]
    Show settings:  python main.py config
"""

import logging
import sys
from dataclasses import asdict

from lenslink.clock import SystemClock
from lenslink.config import settings
from lenslink.notifications import Notifier
from lenslink.services import (
    AdminService,
    BookingService,
    FeedbackService,
    PhotographerService,
    UserService,
)
from lenslink.store import create_store

logger = logging.getLogger(__name__)


def build_services() -> dict[str, object]:
    """Wire the services against the configured store with one shared notifier."""
    store = create_store(settings.store)
    clock = SystemClock()
    notifier = Notifier(config=settings.notifications)
    bookings = BookingService(store, clock, notifier, policy=settings.policy)
    services = {
        "users": UserService(store, clock, notifier),
        "photographers": PhotographerService(store, clock, notifier),
        "bookings": bookings,
        "admin": AdminService(store, clock, notifier, bookings=bookings),
        "feedback": FeedbackService(store, clock, notifier),
    }
    logger.info("Services ready on the %s store", settings.store.backend)
    return services


def _run_console_mode(scenario: str = "") -> int:
    """Start the offline console demo (in-memory store, frozen clock)."""
    from console_demo import ConsoleSession

    if scenario and scenario not in ConsoleSession.SCENARIOS:
        choices = ", ".join(ConsoleSession.SCENARIOS)
        print(f"Unknown scenario: {scenario!r}. Choose from: {choices}")
        print(__doc__)
        return 2
    session = ConsoleSession()
    if scenario:
        session.run_scenario(scenario)
    else:
        session.run()
    return 0


def _print_config() -> None:
    for section, values in asdict(settings).items():
        print(f"{section}: {values}")


if __name__ == "__main__":
    command = sys.argv[1] if len(sys.argv) > 1 else "console"
    if command == "console":
        sys.exit(_run_console_mode(sys.argv[2] if len(sys.argv) > 2 else ""))
    elif command == "config":
        _print_config()
    else:
        print(__doc__)
        sys.exit(2)
