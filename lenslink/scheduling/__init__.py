from lenslink.scheduling.availability import WEEKDAY_KEYS, get_available_slots, resolve_day
from lenslink.scheduling.conflicts import ACTIVE_STATUSES, ensure_no_conflict, find_conflicts
from lenslink.scheduling.ledger import record_reassignment
from lenslink.scheduling.policy import can_cancel, can_modify, compute_cancellation
from lenslink.scheduling.state_machine import ActorRole, BookingStateMachine

__all__ = [
    "WEEKDAY_KEYS", "get_available_slots", "resolve_day",
    "ACTIVE_STATUSES", "ensure_no_conflict", "find_conflicts",
    "record_reassignment",
    "can_cancel", "can_modify", "compute_cancellation",
    "ActorRole", "BookingStateMachine",
]
