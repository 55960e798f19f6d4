"""
Fire-and-forget notification dispatch.

Lifecycle transitions hand notifications to a ``Notifier`` and move on.
Delivery happens on a small worker pool (or inline when async dispatch is
switched off); a failing sender is logged and never reaches the caller.
There are no retries.
"""

import asyncio
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, Protocol

from lenslink.config import NotificationConfig, settings
from lenslink.notifications.templates import NotificationKind, render

logger = logging.getLogger(__name__)

DoneCallback = Callable[[bool], None]


class NotificationSender(Protocol):
    def send(self, recipient: str, kind: NotificationKind, payload: dict[str, Any]) -> None:
        """Deliver one notification. May raise on delivery failure."""
        ...


class LoggingSender:
    """Renders each notification and writes it to the log instead of a mailbox."""

    def __init__(self, sender_address: Optional[str] = None) -> None:
        self.sender_address = sender_address or settings.notifications.sender_address

    def send(self, recipient: str, kind: NotificationKind, payload: dict[str, Any]) -> None:
        subject, body = render(kind, payload)
        logger.info(
            "Notification %s from %s to %s: %s", kind.value, self.sender_address, recipient, subject
        )
        logger.debug("Notification body:\n%s", body)


class Notifier:
    """Hands notifications to a sender without letting failures escape."""

    def __init__(
        self,
        sender: Optional[NotificationSender] = None,
        config: Optional[NotificationConfig] = None,
    ) -> None:
        self.config = config or settings.notifications
        self.sender: NotificationSender = sender or LoggingSender(self.config.sender_address)
        self._executor: Optional[ThreadPoolExecutor] = None
        if self.config.async_dispatch:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="notify"
            )

    def _deliver(
        self,
        recipient: str,
        kind: NotificationKind,
        payload: dict[str, Any],
        on_done: Optional[DoneCallback],
    ) -> bool:
        try:
            self.sender.send(recipient, kind, payload)
            ok = True
        except Exception:
            logger.warning(
                "Notification %s to %s failed", kind.value, recipient, exc_info=True
            )
            ok = False
        self._report(kind, ok, on_done)
        return ok

    @staticmethod
    def _report(kind: NotificationKind, ok: bool, on_done: Optional[DoneCallback]) -> None:
        if on_done is None:
            return
        try:
            on_done(ok)
        except Exception:
            logger.warning("Notification callback for %s failed", kind.value, exc_info=True)

    def dispatch(
        self,
        recipient: Optional[str],
        kind: NotificationKind,
        payload: dict[str, Any],
        on_done: Optional[DoneCallback] = None,
    ) -> Optional[Future]:
        """Queue a notification. Returns the pending future when dispatching async."""
        if not recipient:
            logger.warning("Skipping %s notification: no recipient", kind.value)
            self._report(kind, False, on_done)
            return None
        if self._executor is None:
            self._deliver(recipient, kind, dict(payload), on_done)
            return None
        return self._executor.submit(self._deliver, recipient, kind, dict(payload), on_done)

    async def adispatch(
        self,
        recipient: Optional[str],
        kind: NotificationKind,
        payload: dict[str, Any],
    ) -> bool:
        """Deliver from async code without blocking the event loop."""
        if not recipient:
            return False
        return await asyncio.to_thread(self._deliver, recipient, kind, dict(payload), None)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool, optionally waiting for queued deliveries."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
