"""Contact-form submissions."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from lenslink.schemas.user_schema import utcnow


class EmailStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class Feedback(BaseModel):
    """A message from the public contact form.

    ``email_status`` tracks the confirmation/alert emails, which are sent
    after the record is stored and never block the submission.
    """

    id: str
    name: str = Field(..., max_length=100)
    email: str
    subject: str = Field("General Enquiry", max_length=200)
    message: str = Field(..., max_length=2000)
    email_status: EmailStatus = EmailStatus.PENDING
    read: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
