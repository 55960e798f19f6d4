"""
Contact-form submissions.

A submission is stored first, then a confirmation goes to the sender and
an alert to the admin mailbox. Neither delivery blocks the caller; when
both have finished the record's ``email_status`` becomes ``sent``, or
``failed`` if either delivery failed.
"""

import logging
import threading
from typing import Optional

from lenslink.errors import ValidationError
from lenslink.notifications import NotificationKind
from lenslink.schemas import EmailStatus, Feedback
from lenslink.scheduling.validation import validate_text
from lenslink.services.base import BaseService, Page, paginate
from lenslink.utils import is_valid_email, new_id, normalize_email

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_SUBJECT_LENGTH = 200
MAX_FEEDBACK_LENGTH = 2000
DEFAULT_SUBJECT = "General Enquiry"


class _DeliveryTracker:
    """Collects the outcome of several deliveries and reports once."""

    def __init__(self, expected: int, on_complete) -> None:
        self._remaining = expected
        self._ok = True
        self._lock = threading.Lock()
        self._on_complete = on_complete

    def __call__(self, ok: bool) -> None:
        with self._lock:
            self._ok = self._ok and ok
            self._remaining -= 1
            if self._remaining:
                return
            result = self._ok
        self._on_complete(result)


class FeedbackService(BaseService):

    def submit_feedback(
        self,
        name: str,
        email: str,
        message: str,
        subject: Optional[str] = None,
    ) -> Feedback:
        name = validate_text(name, "name", MAX_NAME_LENGTH, required=True)
        if not email or not is_valid_email(email):
            raise ValidationError("A valid email is required", field="email")
        message = validate_text(message, "message", MAX_FEEDBACK_LENGTH, required=True)
        subject = validate_text(subject, "subject", MAX_SUBJECT_LENGTH) or DEFAULT_SUBJECT

        now = self.clock.now()
        feedback = self.store.feedback.add(Feedback(
            id=new_id("FB"),
            name=name,
            email=normalize_email(email),
            subject=subject,
            message=message,
            created_at=now,
            updated_at=now,
        ))
        logger.info("Feedback stored: %s", feedback.id)

        def record_outcome(ok: bool) -> None:
            status = EmailStatus.SENT if ok else EmailStatus.FAILED

            def mutate(f: Feedback) -> None:
                f.email_status = status

            self.store.feedback.update(feedback.id, mutate, now=self.clock.now())
            if ok:
                logger.info("Feedback emails sent for %s", feedback.id)
            else:
                logger.error("Feedback emails failed for %s", feedback.id)

        tracker = _DeliveryTracker(2, record_outcome)
        payload = {
            "recipient_name": feedback.name,
            "name": feedback.name,
            "email": feedback.email,
            "subject": feedback.subject,
            "message": feedback.message,
        }
        self.notifier.dispatch(
            feedback.email, NotificationKind.FEEDBACK_RECEIVED, payload, on_done=tracker
        )
        self.notifier.dispatch(
            self.notifier.config.admin_email,
            NotificationKind.FEEDBACK_ALERT,
            {**payload, "recipient_name": "Admin"},
            on_done=tracker,
        )
        return self.store.feedback.require(feedback.id)

    def mark_read(self, feedback_id: str, admin_id: str) -> Feedback:
        self.require_admin(admin_id)

        def mutate(f: Feedback) -> None:
            f.read = True

        return self.store.feedback.update(feedback_id, mutate, now=self.clock.now())

    def list_feedback(
        self,
        admin_id: str,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Feedback]:
        """Submissions for the admin inbox, newest first."""
        self.require_admin(admin_id)
        items = self.store.feedback.find(lambda f: not (unread_only and f.read))
        items.sort(key=lambda f: f.created_at, reverse=True)
        return paginate(items, page, limit)

    def delete_feedback(self, feedback_id: str, admin_id: str) -> Feedback:
        """Remove a submission from the inbox. Returns the deleted record."""
        self.require_admin(admin_id)
        feedback = self.store.feedback.remove(feedback_id)
        logger.info("Feedback %s deleted by %s", feedback_id, admin_id)
        return feedback
