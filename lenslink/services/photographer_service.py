"""
Photographer profiles: business details, weekly availability, portfolio,
package deals and reviews.

The aggregate rating is derived state. It is recomputed from ``reviews``
on every review mutation and never written any other way.
"""

import logging
from datetime import date
from typing import Any, Optional

from lenslink.errors import UnauthorizedError, ValidationError
from lenslink.notifications import NotificationKind
from lenslink.schemas import (
    PackageDeal,
    Photographer,
    PhotographerReview,
    PortfolioItem,
    Rating,
    Specialty,
    UserRole,
    WeeklyAvailability,
)
from lenslink.scheduling.availability import get_available_slots
from lenslink.scheduling.validation import (
    MAX_REVIEW_COMMENT_LENGTH,
    validate_amount,
    validate_rating,
    validate_text,
)
from lenslink.services.base import BaseService, Page, paginate
from lenslink.utils import new_id

logger = logging.getLogger(__name__)

MAX_BIO_LENGTH = 500
MAX_BUSINESS_NAME_LENGTH = 100
EDITABLE_PROFILE_FIELDS = ("business_name", "bio", "specialties", "hourly_rate")
SORT_KEYS = ("rating", "hourly_rate", "newest")


def recalculate_rating(photographer: Photographer) -> Rating:
    """Mean of review ratings rounded to one decimal; 0 with no reviews."""
    reviews = photographer.reviews
    if not reviews:
        photographer.rating = Rating(average=0.0, count=0)
    else:
        total = sum(r.rating for r in reviews)
        photographer.rating = Rating(
            average=round(total / len(reviews) + 1e-9, 1), count=len(reviews)
        )
    return photographer.rating


def append_review(photographer: Photographer, review: PhotographerReview) -> None:
    photographer.reviews.append(review)
    recalculate_rating(photographer)


def _parse_specialties(values: Any) -> list[Specialty]:
    try:
        specialties = [Specialty(v) for v in values or []]
    except ValueError as exc:
        raise ValidationError(f"Invalid specialty: {exc}", field="specialties") from None
    return list(dict.fromkeys(specialties))


class PhotographerService(BaseService):

    def _require_owner_or_admin(self, photographer: Photographer, actor_id: str) -> None:
        actor = self.require_active_user(actor_id)
        if actor.role != UserRole.ADMIN and photographer.user_id != actor.id:
            raise UnauthorizedError("Not authorized to edit this photographer profile")

    def create_profile(
        self,
        user_id: str,
        business_name: str,
        bio: Optional[str] = None,
        specialties: Optional[list[str]] = None,
        hourly_rate: float = 0.0,
        availability: Optional[WeeklyAvailability] = None,
    ) -> Photographer:
        """Create the single profile owned by a photographer account."""
        user = self.require_active_user(user_id)
        if user.role != UserRole.PHOTOGRAPHER:
            raise ValidationError("Only photographer accounts can own a profile", field="user_id")
        if self.get_by_user(user_id) is not None:
            raise ValidationError("Photographer profile already exists", field="user_id")

        now = self.clock.now()
        photographer = self.store.photographers.add(Photographer(
            id=new_id("PH"),
            user_id=user_id,
            business_name=validate_text(
                business_name, "business_name", MAX_BUSINESS_NAME_LENGTH, required=True
            ),
            bio=validate_text(bio, "bio", MAX_BIO_LENGTH),
            specialties=_parse_specialties(specialties),
            hourly_rate=validate_amount(hourly_rate, "hourly_rate"),
            availability=availability or WeeklyAvailability(),
            created_at=now,
            updated_at=now,
        ))
        logger.info("Photographer profile created: %s for user %s", photographer.id, user_id)
        return photographer

    def get_profile(self, photographer_id: str) -> Photographer:
        return self.store.photographers.require(photographer_id)

    def get_by_user(self, user_id: str) -> Optional[Photographer]:
        return self.store.photographers.find_one(lambda p: p.user_id == user_id)

    def update_profile(
        self, photographer_id: str, actor_id: str, changes: dict[str, Any]
    ) -> Photographer:
        photographer = self.store.photographers.require(photographer_id)
        self._require_owner_or_admin(photographer, actor_id)

        unknown = set(changes) - set(EDITABLE_PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update fields: {sorted(unknown)}")

        cleaned: dict[str, Any] = {}
        if "business_name" in changes:
            cleaned["business_name"] = validate_text(
                changes["business_name"], "business_name", MAX_BUSINESS_NAME_LENGTH, required=True
            )
        if "bio" in changes:
            cleaned["bio"] = validate_text(changes["bio"], "bio", MAX_BIO_LENGTH)
        if "specialties" in changes:
            cleaned["specialties"] = _parse_specialties(changes["specialties"])
        if "hourly_rate" in changes:
            cleaned["hourly_rate"] = validate_amount(changes["hourly_rate"], "hourly_rate")

        def mutate(p: Photographer) -> None:
            for key, value in cleaned.items():
                setattr(p, key, value)

        return self.store.photographers.update(photographer_id, mutate, now=self.clock.now())

    def set_availability(
        self, photographer_id: str, actor_id: str, availability: WeeklyAvailability
    ) -> Photographer:
        """Replace the declared weekly availability wholesale."""
        photographer = self.store.photographers.require(photographer_id)
        self._require_owner_or_admin(photographer, actor_id)

        cleaned = availability.model_copy(deep=True)
        for day_name in WeeklyAvailability.model_fields:
            day = getattr(cleaned, day_name)
            day.time_slots = [s.strip() for s in day.time_slots if s and s.strip()]

        def mutate(p: Photographer) -> None:
            p.availability = cleaned

        logger.info("Availability updated for %s", photographer_id)
        return self.store.photographers.update(photographer_id, mutate, now=self.clock.now())

    def available_slots(self, photographer_id: str, day: date) -> list[str]:
        photographer = self.store.photographers.require(photographer_id)
        return get_available_slots(photographer.availability, day)

    def add_portfolio_item(
        self,
        photographer_id: str,
        actor_id: str,
        title: str,
        image_url: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
    ) -> PortfolioItem:
        photographer = self.store.photographers.require(photographer_id)
        self._require_owner_or_admin(photographer, actor_id)
        item = PortfolioItem(
            id=new_id("PF"),
            title=validate_text(title, "title", 200, required=True),
            image_url=validate_text(image_url, "image_url", 2048, required=True),
            description=validate_text(description, "description", 1000),
            category=category,
            created_at=self.clock.now(),
        )

        def mutate(p: Photographer) -> None:
            p.portfolio.append(item)

        self.store.photographers.update(photographer_id, mutate, now=self.clock.now())
        return item

    def remove_portfolio_item(
        self, photographer_id: str, actor_id: str, item_id: str
    ) -> Photographer:
        photographer = self.store.photographers.require(photographer_id)
        self._require_owner_or_admin(photographer, actor_id)
        if not any(item.id == item_id for item in photographer.portfolio):
            raise ValidationError(f"Portfolio item {item_id} not found", field="item_id")

        def mutate(p: Photographer) -> None:
            p.portfolio = [item for item in p.portfolio if item.id != item_id]

        return self.store.photographers.update(photographer_id, mutate, now=self.clock.now())

    def add_package_deal(
        self,
        photographer_id: str,
        actor_id: str,
        name: str,
        price: float,
        description: Optional[str] = None,
        duration: Optional[float] = None,
        includes: Optional[list[str]] = None,
    ) -> PackageDeal:
        photographer = self.store.photographers.require(photographer_id)
        self._require_owner_or_admin(photographer, actor_id)
        if duration is not None and duration <= 0:
            raise ValidationError("Package duration must be positive", field="duration")
        deal = PackageDeal(
            id=new_id("PKG"),
            name=validate_text(name, "name", 100, required=True),
            description=validate_text(description, "description", 500),
            price=validate_amount(price, "price"),
            duration=duration,
            includes=list(includes or []),
        )

        def mutate(p: Photographer) -> None:
            p.package_deals.append(deal)

        self.store.photographers.update(photographer_id, mutate, now=self.clock.now())
        return deal

    def add_review(
        self,
        photographer_id: str,
        client_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Photographer:
        """Direct profile review; one per client per photographer."""
        client = self.require_active_user(client_id)
        photographer = self.store.photographers.require(photographer_id)
        if photographer.user_id == client.id:
            raise UnauthorizedError("Photographers cannot review themselves")
        review = PhotographerReview(
            client_id=client.id,
            rating=validate_rating(rating),
            comment=validate_text(comment, "comment", MAX_REVIEW_COMMENT_LENGTH),
            created_at=self.clock.now(),
        )

        def mutate(p: Photographer) -> None:
            if any(r.client_id == client.id for r in p.reviews):
                raise ValidationError("You have already reviewed this photographer")
            append_review(p, review)

        updated = self.store.photographers.update(photographer_id, mutate, now=self.clock.now())
        self.notifier.dispatch(
            self.user_email(updated.user_id),
            NotificationKind.REVIEW_RECEIVED,
            {"recipient_name": updated.business_name, "rating": review.rating},
        )
        return updated

    def search(
        self,
        specialty: Optional[str] = None,
        min_rating: Optional[float] = None,
        max_hourly_rate: Optional[float] = None,
        include_inactive: bool = False,
        sort_by: str = "rating",
        page: int = 1,
        limit: int = 10,
    ) -> Page[Photographer]:
        """Filter, sort and page photographer profiles. Reviews are left attached."""
        if sort_by not in SORT_KEYS:
            raise ValidationError(f"sort_by must be one of {SORT_KEYS}", field="sort_by")
        wanted = _parse_specialties([specialty])[0] if specialty else None

        def matches(p: Photographer) -> bool:
            if not include_inactive and not p.is_active:
                return False
            if wanted is not None and wanted not in p.specialties:
                return False
            if min_rating is not None and p.rating.average < min_rating:
                return False
            if max_hourly_rate is not None and p.hourly_rate > max_hourly_rate:
                return False
            return True

        results = self.store.photographers.find(matches)
        if sort_by == "rating":
            results.sort(key=lambda p: (p.rating.average, p.rating.count), reverse=True)
        elif sort_by == "hourly_rate":
            results.sort(key=lambda p: p.hourly_rate)
        else:
            results.sort(key=lambda p: p.created_at, reverse=True)
        return paginate(results, page, limit)
