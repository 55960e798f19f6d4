"""
Entity store interface.

Every adapter exposes the same four repositories keyed by opaque string
ids. Besides ``add`` and ``remove`` the only write primitive is ``update``:
a single-document read-modify-write that either stores the mutated copy
or, when the mutator raises, stores nothing. Callers pass ``now`` so the
``updated_at`` stamp follows their clock.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from lenslink.errors import NotFoundError
from lenslink.schemas import Booking, Feedback, Photographer, User

T = TypeVar("T", bound=BaseModel)


class Repository(ABC, Generic[T]):
    """A collection of one entity type."""

    entity_name: str = "Entity"

    @abstractmethod
    def add(self, entity: T) -> T:
        """Insert a new entity. Raises ValueError if the id is taken."""

    @abstractmethod
    def get(self, entity_id: str) -> Optional[T]:
        """Return a copy of the entity, or None if absent."""

    @abstractmethod
    def all(self) -> list[T]:
        """Return copies of every entity in insertion order."""

    @abstractmethod
    def update(
        self,
        entity_id: str,
        mutator: Callable[[T], None],
        now: Optional[datetime] = None,
    ) -> T:
        """Apply ``mutator`` to a copy and store it atomically, stamping ``now``.

        Raises:
            NotFoundError: If the id is unknown.
            Exception: Whatever the mutator raises; the stored entity is unchanged.
        """

    @abstractmethod
    def remove(self, entity_id: str) -> T:
        """Delete the entity and return its last stored state.

        Raises:
            NotFoundError: If the id is unknown.
        """

    def require(self, entity_id: str) -> T:
        entity = self.get(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    def find(self, predicate: Callable[[T], bool]) -> list[T]:
        return [e for e in self.all() if predicate(e)]

    def find_one(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for entity in self.all():
            if predicate(entity):
                return entity
        return None

    def count(self, predicate: Optional[Callable[[T], bool]] = None) -> int:
        if predicate is None:
            return len(self.all())
        return len(self.find(predicate))


def touch(entity: BaseModel, now: Optional[datetime] = None) -> None:
    """Stamp ``updated_at`` on models that carry it, defaulting to wall-clock UTC."""
    if "updated_at" in type(entity).model_fields:
        entity.updated_at = now or datetime.now(timezone.utc)  # type: ignore[attr-defined]


class EntityStore(ABC):
    """Groups the repositories the booking core works against."""

    users: Repository[User]
    photographers: Repository[Photographer]
    bookings: Repository[Booking]
    feedback: Repository[Feedback]
