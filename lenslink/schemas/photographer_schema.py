"""Photographer profiles, weekly availability and reviews."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from lenslink.schemas.user_schema import utcnow


class Specialty(str, Enum):
    WEDDINGS = "weddings"
    PORTRAITS = "portraits"
    EVENTS = "events"
    COMMERCIAL = "commercial"
    FASHION = "fashion"
    NATURE = "nature"
    STREET = "street"
    SPORTS = "sports"
    OTHER = "other"


class DayAvailability(BaseModel):
    """Whether a weekday is bookable and the declared slot strings for it."""
    available: bool = False
    time_slots: list[str] = Field(default_factory=list)


class WeeklyAvailability(BaseModel):
    """Declared availability keyed by weekday name."""
    monday: DayAvailability = Field(default_factory=DayAvailability)
    tuesday: DayAvailability = Field(default_factory=DayAvailability)
    wednesday: DayAvailability = Field(default_factory=DayAvailability)
    thursday: DayAvailability = Field(default_factory=DayAvailability)
    friday: DayAvailability = Field(default_factory=DayAvailability)
    saturday: DayAvailability = Field(default_factory=DayAvailability)
    sunday: DayAvailability = Field(default_factory=DayAvailability)


class PackageDeal(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    duration: Optional[float] = Field(None, description="Hours covered by the package")
    includes: list[str] = Field(default_factory=list)


class PortfolioItem(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    image_url: str
    category: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class PhotographerReview(BaseModel):
    client_id: str
    booking_id: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Rating(BaseModel):
    """Aggregate derived from reviews; never edited directly."""
    average: float = 0.0
    count: int = 0


class Photographer(BaseModel):
    """Business profile owned 1:1 by a user with the photographer role."""

    id: str
    user_id: str
    business_name: str
    bio: Optional[str] = None
    specialties: list[Specialty] = Field(default_factory=list)
    hourly_rate: float = Field(0.0, ge=0)
    package_deals: list[PackageDeal] = Field(default_factory=list)
    portfolio: list[PortfolioItem] = Field(default_factory=list)
    availability: WeeklyAvailability = Field(default_factory=WeeklyAvailability)
    reviews: list[PhotographerReview] = Field(default_factory=list)
    rating: Rating = Field(default_factory=Rating)
    is_verified: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def find_package(self, package_id: str) -> Optional[PackageDeal]:
        for deal in self.package_deals:
            if deal.id == package_id:
                return deal
        return None
