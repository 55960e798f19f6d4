"""Booking records, their embedded sub-documents and request models."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from lenslink.schemas.user_schema import utcnow


class BookingStatus(str, Enum):
    """All states in a booking lifecycle."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class EventType(str, Enum):
    WEDDING = "wedding"
    PORTRAIT = "portrait"
    EVENT = "event"
    COMMERCIAL = "commercial"
    FASHION = "fashion"
    LANDSCAPE = "landscape"
    WILDLIFE = "wildlife"
    SPORTS = "sports"
    FOOD = "food"
    ARCHITECTURE = "architecture"
    NEWBORN = "newborn"
    FAMILY = "family"
    CORPORATE = "corporate"
    PRODUCT = "product"
    REAL_ESTATE = "real-estate"
    OTHER = "other"


class Location(BaseModel):
    venue: str
    address: str
    city: str


class PackageSelection(BaseModel):
    """Snapshot of the package chosen at booking time."""
    name: Optional[str] = None
    price: float = Field(..., ge=0)
    includes: list[str] = Field(default_factory=list)


class Message(BaseModel):
    sender_id: str
    message: str
    timestamp: datetime = Field(default_factory=utcnow)
    is_read: bool = False


class BookingReview(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    review_date: datetime = Field(default_factory=utcnow)


class ReassignmentEntry(BaseModel):
    """One admin substitution of the assigned photographer. Immutable."""

    model_config = ConfigDict(frozen=True)

    previous_photographer: str
    new_photographer: str
    reason: str
    reassigned_at: datetime
    reassigned_by: str


class Booking(BaseModel):
    """A scheduled shoot between a client and a photographer."""

    id: str
    client_id: str
    photographer_id: str
    event_type: EventType
    event_date: date
    start_time: str = Field(..., description="HH:MM, 24-hour")
    end_time: str = Field(..., description="HH:MM, 24-hour")
    duration: float = Field(..., gt=0, description="Hours between start and end")
    location: Location
    package: Optional[PackageSelection] = None
    total_amount: float = Field(..., ge=0)
    advance_amount: float = Field(0.0, ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: BookingStatus = BookingStatus.PENDING
    special_requests: Optional[str] = None
    guest_count: Optional[int] = None
    communication: list[Message] = Field(default_factory=list)
    review: Optional[BookingReview] = None
    cancellation_reason: Optional[str] = None
    cancellation_date: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    cancellation_fee: float = 0.0
    refund_amount: float = 0.0
    completed_at: Optional[datetime] = None
    reassignment_history: list[ReassignmentEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def remaining_balance(self) -> float:
        return max(0.0, self.total_amount - self.advance_amount)


class BookingRequest(BaseModel):
    """Booking details supplied by the client alongside date and time."""
    event_type: str
    location: Location
    package_id: Optional[str] = None
    total_amount: Optional[float] = None
    advance_amount: float = 0.0
    special_requests: Optional[str] = None
    guest_count: Optional[int] = None


class BookingUpdate(BaseModel):
    """Fields a client may change while the modification window is open."""
    event_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[Location] = None
    event_type: Optional[str] = None
    special_requests: Optional[str] = None
    guest_count: Optional[int] = None
    total_amount: Optional[float] = None


class CancellationResult(BaseModel):
    """Outcome of a cancellation."""
    booking: Booking
    fee: float
    refund: float
