"""Admin back-office operations. Every call requires an active admin."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from lenslink.clock import Clock
from lenslink.notifications import Notifier
from lenslink.schemas import Booking, BookingStatus, Photographer, User, UserRole
from lenslink.services.base import BaseService, Page, paginate
from lenslink.services.booking_service import BookingService
from lenslink.store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class DashboardStats:
    total_users: int = 0
    users_by_role: dict[str, int] = field(default_factory=dict)
    total_photographers: int = 0
    active_photographers: int = 0
    total_bookings: int = 0
    bookings_by_status: dict[str, int] = field(default_factory=dict)
    completed_revenue: float = 0.0
    total_messages: int = 0
    unread_messages: int = 0


class AdminService(BaseService):
    """
    Admin views over users, photographers, bookings and feedback.

    Reassignment is delegated to ``BookingService`` so it goes through the
    same per-photographer serialisation as booking creation.
    """

    def __init__(
        self,
        store: EntityStore,
        clock: Optional[Clock] = None,
        notifier: Optional[Notifier] = None,
        bookings: Optional[BookingService] = None,
    ) -> None:
        super().__init__(store, clock, notifier)
        self.bookings = bookings or BookingService(self.store, self.clock, self.notifier)

    def dashboard_stats(self, admin_id: str) -> DashboardStats:
        self.require_admin(admin_id)
        users = self.store.users.all()
        photographers = self.store.photographers.all()
        bookings = self.store.bookings.all()
        feedback = self.store.feedback.all()

        by_role = Counter(u.role.value for u in users)
        by_status = Counter(b.status.value for b in bookings)
        revenue = sum(b.total_amount for b in bookings if b.status == BookingStatus.COMPLETED)
        return DashboardStats(
            total_users=len(users),
            users_by_role={role.value: by_role.get(role.value, 0) for role in UserRole},
            total_photographers=len(photographers),
            active_photographers=sum(1 for p in photographers if p.is_active),
            total_bookings=len(bookings),
            bookings_by_status={s.value: by_status.get(s.value, 0) for s in BookingStatus},
            completed_revenue=round(revenue, 2),
            total_messages=len(feedback),
            unread_messages=sum(1 for f in feedback if not f.read),
        )

    def list_users(self, admin_id: str, page: int = 1, limit: int = 10) -> Page[User]:
        self.require_admin(admin_id)
        users = self.store.users.all()
        users.sort(key=lambda u: u.created_at, reverse=True)
        return paginate(users, page, limit)

    def set_user_active(self, admin_id: str, user_id: str, is_active: bool) -> User:
        self.require_admin(admin_id)

        def mutate(u: User) -> None:
            u.is_active = is_active

        user = self.store.users.update(user_id, mutate, now=self.clock.now())
        logger.info("User %s active=%s by %s", user_id, is_active, admin_id)
        return user

    def set_photographer_active(
        self, admin_id: str, photographer_id: str, is_active: bool
    ) -> Photographer:
        """Hide or restore a photographer. Existing bookings are untouched."""
        self.require_admin(admin_id)

        def mutate(p: Photographer) -> None:
            p.is_active = is_active

        photographer = self.store.photographers.update(
            photographer_id, mutate, now=self.clock.now()
        )
        logger.info("Photographer %s active=%s by %s", photographer_id, is_active, admin_id)
        return photographer

    def verify_photographer(self, admin_id: str, photographer_id: str) -> Photographer:
        self.require_admin(admin_id)

        def mutate(p: Photographer) -> None:
            p.is_verified = True

        return self.store.photographers.update(photographer_id, mutate, now=self.clock.now())

    def list_all_bookings(
        self,
        admin_id: str,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Booking]:
        self.require_admin(admin_id)
        return self.bookings.list_bookings(admin_id, status=status, page=page, limit=limit)

    def reassign_photographer(
        self,
        admin_id: str,
        booking_id: str,
        new_photographer_id: str,
        reason: Optional[str] = None,
    ) -> Booking:
        return self.bookings.reassign_photographer(
            booking_id, admin_id, new_photographer_id, reason
        )
