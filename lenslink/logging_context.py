"""Request correlation logging context.

Provides a request_id-aware logger that attaches a correlation ID to every
log record, so one booking request can be traced through availability,
conflict and lifecycle checks down to the notifications it triggers.

Usage:
    from lenslink.logging_context import get_request_logger, set_request_id

    set_request_id("REQ-7f3a")
    logger = get_request_logger(__name__)
    logger.info("Creating booking")  # record.request_id == "REQ-7f3a"
"""

import logging
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="NO_REQUEST_ID")


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
