"""Plain-text subject and body rendering for outbound notifications."""

from enum import Enum
from typing import Any

from lenslink.config import settings


class NotificationKind(str, Enum):
    WELCOME = "welcome"
    BOOKING_CREATED = "booking_created"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"
    PHOTOGRAPHER_REASSIGNED = "photographer_reassigned"
    REVIEW_RECEIVED = "review_received"
    FEEDBACK_RECEIVED = "feedback_received"
    FEEDBACK_ALERT = "feedback_alert"


SUBJECTS: dict[NotificationKind, str] = {
    NotificationKind.WELCOME: "Welcome to {app_name}!",
    NotificationKind.BOOKING_CREATED: "New booking from {client_name} - {app_name}",
    NotificationKind.BOOKING_CONFIRMED: "Your booking with {photographer_name} is confirmed",
    NotificationKind.BOOKING_REJECTED: "Your booking request with {photographer_name} was declined",
    NotificationKind.BOOKING_CANCELLED: "Booking on {event_date} has been cancelled",
    NotificationKind.BOOKING_COMPLETED: "How was your shoot with {photographer_name}?",
    NotificationKind.PHOTOGRAPHER_REASSIGNED: "Your booking on {event_date} has a new photographer",
    NotificationKind.REVIEW_RECEIVED: "You received a {rating}-star review",
    NotificationKind.FEEDBACK_RECEIVED: "We received your message - {app_name}",
    NotificationKind.FEEDBACK_ALERT: "[{app_name} Feedback] {subject} from {name}",
}


def build_booking_summary(payload: dict[str, Any]) -> str:
    """Summarise the booking fields present in ``payload``, one per line."""
    lines: list[str] = []
    for key in ("booking_id", "event_type", "event_date", "start_time", "end_time",
                "venue", "total_amount", "fee", "refund", "reason"):
        value = payload.get(key)
        if value is not None and value != "":
            lines.append(f"  {key.replace('_', ' ')}: {value}")
    return "\n".join(lines)


def render(kind: NotificationKind, payload: dict[str, Any]) -> tuple[str, str]:
    """
    Render a notification.

    Missing payload keys render as empty strings rather than failing, so
    a sparse payload still produces a deliverable message.

    Returns:
        (subject, body)
    """
    values = _DefaultDict(payload)
    values.setdefault("app_name", settings.app_name)
    subject = SUBJECTS[kind].format_map(values)

    body_lines = [f"Hi {values['recipient_name'] or 'there'},", ""]
    if kind == NotificationKind.FEEDBACK_ALERT:
        body_lines.append(f"{values['name']} <{values['email']}> wrote:")
        body_lines.append(str(values["message"]))
    elif kind == NotificationKind.FEEDBACK_RECEIVED:
        body_lines.append("Thanks for reaching out. We will reply within 24 hours.")
    elif kind == NotificationKind.WELCOME:
        body_lines.append(f"Your {values['role'] or 'client'} account is ready.")
    else:
        summary = build_booking_summary(payload)
        if summary:
            body_lines.append("Booking details:")
            body_lines.append(summary)
    body_lines.extend(["", f"- The {values['app_name']} team"])
    return subject, "\n".join(body_lines)


class _DefaultDict(dict):
    def __missing__(self, key: str) -> str:
        return ""
