from lenslink.schemas.booking_schema import (
    Booking,
    BookingRequest,
    BookingReview,
    BookingStatus,
    BookingUpdate,
    CancellationResult,
    EventType,
    Location,
    Message,
    PackageSelection,
    PaymentStatus,
    ReassignmentEntry,
)
from lenslink.schemas.feedback_schema import EmailStatus, Feedback
from lenslink.schemas.photographer_schema import (
    DayAvailability,
    PackageDeal,
    Photographer,
    PhotographerReview,
    PortfolioItem,
    Rating,
    Specialty,
    WeeklyAvailability,
)
from lenslink.schemas.user_schema import User, UserRole

__all__ = [
    "Booking", "BookingRequest", "BookingReview", "BookingStatus", "BookingUpdate",
    "CancellationResult", "EventType", "Location", "Message", "PackageSelection",
    "PaymentStatus", "ReassignmentEntry",
    "EmailStatus", "Feedback",
    "DayAvailability", "PackageDeal", "Photographer", "PhotographerReview",
    "PortfolioItem", "Rating", "Specialty", "WeeklyAvailability",
    "User", "UserRole",
]
