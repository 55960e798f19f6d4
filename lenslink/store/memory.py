"""
In-memory entity store.

Dict-backed repositories for tests, the console demo and single-process
deployments. Entities are deep-copied on the way in and out so callers
can never mutate stored state except through ``update``.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Generic, Optional

from lenslink.errors import NotFoundError
from lenslink.schemas import Booking, Feedback, Photographer, User
from lenslink.store.base import EntityStore, Repository, T, touch

logger = logging.getLogger(__name__)


class MemoryRepository(Repository[T], Generic[T]):
    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        self._items: dict[str, T] = {}
        self._lock = threading.RLock()

    def add(self, entity: T) -> T:
        entity_id = entity.id  # type: ignore[attr-defined]
        with self._lock:
            if entity_id in self._items:
                raise ValueError(f"{self.entity_name} {entity_id} already exists")
            self._items[entity_id] = entity.model_copy(deep=True)
        logger.debug("%s stored: %s", self.entity_name, entity_id)
        return entity.model_copy(deep=True)

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            entity = self._items.get(entity_id)
            return entity.model_copy(deep=True) if entity is not None else None

    def all(self) -> list[T]:
        with self._lock:
            return [e.model_copy(deep=True) for e in self._items.values()]

    def update(
        self,
        entity_id: str,
        mutator: Callable[[T], None],
        now: Optional[datetime] = None,
    ) -> T:
        with self._lock:
            current = self._items.get(entity_id)
            if current is None:
                raise NotFoundError(self.entity_name, entity_id)
            draft = current.model_copy(deep=True)
            mutator(draft)
            touch(draft, now)
            self._items[entity_id] = draft
            return draft.model_copy(deep=True)

    def remove(self, entity_id: str) -> T:
        with self._lock:
            entity = self._items.pop(entity_id, None)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        logger.debug("%s removed: %s", self.entity_name, entity_id)
        return entity

    def reset(self) -> None:
        """Clear all entities. Used by test fixtures for isolation."""
        with self._lock:
            self._items.clear()


class MemoryStore(EntityStore):
    def __init__(self) -> None:
        self.users: MemoryRepository[User] = MemoryRepository("User")
        self.photographers: MemoryRepository[Photographer] = MemoryRepository("Photographer")
        self.bookings: MemoryRepository[Booking] = MemoryRepository("Booking")
        self.feedback: MemoryRepository[Feedback] = MemoryRepository("Feedback")

    def reset(self) -> None:
        for repo in (self.users, self.photographers, self.bookings, self.feedback):
            repo.reset()
