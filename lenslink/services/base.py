"""Shared plumbing for the service layer: dependencies, actor checks, paging."""

import math
from dataclasses import dataclass
from typing import Generic, Optional, Sequence, TypeVar

from lenslink.clock import Clock, SystemClock
from lenslink.errors import UnauthorizedError, ValidationError
from lenslink.notifications import Notifier
from lenslink.schemas import User, UserRole
from lenslink.store import EntityStore

T = TypeVar("T")

MAX_PAGE_SIZE = 100


@dataclass
class Page(Generic[T]):
    """One page of a sorted result set."""
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def paginate(items: Sequence[T], page: int = 1, limit: int = 10) -> Page[T]:
    if page < 1:
        raise ValidationError("page must be >= 1", field="page")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit")
    start = (page - 1) * limit
    return Page(items=list(items[start:start + limit]), total=len(items), page=page, limit=limit)


class BaseService:
    """Holds the store, clock and notifier every service works with."""

    def __init__(
        self,
        store: EntityStore,
        clock: Optional[Clock] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.store = store
        self.clock: Clock = clock or SystemClock()
        self.notifier = notifier or Notifier()

    def require_active_user(self, user_id: str) -> User:
        """
        Raises:
            NotFoundError: Unknown user id.
            UnauthorizedError: The account is deactivated.
        """
        user = self.store.users.require(user_id)
        if not user.is_active:
            raise UnauthorizedError(f"User {user_id} is deactivated")
        return user

    def require_admin(self, user_id: str) -> User:
        user = self.require_active_user(user_id)
        if user.role != UserRole.ADMIN:
            raise UnauthorizedError("Admin access required")
        return user

    def user_email(self, user_id: str) -> Optional[str]:
        user = self.store.users.get(user_id)
        return user.email if user else None

    def user_name(self, user_id: str) -> str:
        user = self.store.users.get(user_id)
        return user.name if user else ""
