"""
JSON-file entity store.

One ``<collection>.json`` file per repository, rewritten whole on every
write under a lock. Meant for small single-process deployments and local
development; it offers the same single-document atomicity as the memory
store and nothing more.
"""

import json
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Generic, Optional

from lenslink.errors import NotFoundError
from lenslink.schemas import Booking, Feedback, Photographer, User
from lenslink.store.base import EntityStore, Repository, T, touch

logger = logging.getLogger(__name__)


class JsonFileRepository(Repository[T], Generic[T]):
    def __init__(self, path: Path, model: type[T], entity_name: str) -> None:
        self.entity_name = entity_name
        self._path = path
        self._model = model
        self._lock = threading.RLock()

    def _load(self) -> dict[str, T]:
        if not self._path.exists():
            return {}
        raw = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        items = [self._model.model_validate(doc) for doc in raw]
        return {item.id: item for item in items}  # type: ignore[attr-defined]

    def _save(self, items: dict[str, T]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.model_dump(mode="json") for item in items.values()]
        tmp_path = self._path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def add(self, entity: T) -> T:
        entity_id = entity.id  # type: ignore[attr-defined]
        with self._lock:
            items = self._load()
            if entity_id in items:
                raise ValueError(f"{self.entity_name} {entity_id} already exists")
            items[entity_id] = entity
            self._save(items)
        logger.debug("%s written to %s: %s", self.entity_name, self._path, entity_id)
        return entity.model_copy(deep=True)

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            return self._load().get(entity_id)

    def all(self) -> list[T]:
        with self._lock:
            return list(self._load().values())

    def update(
        self,
        entity_id: str,
        mutator: Callable[[T], None],
        now: Optional[datetime] = None,
    ) -> T:
        with self._lock:
            items = self._load()
            current = items.get(entity_id)
            if current is None:
                raise NotFoundError(self.entity_name, entity_id)
            mutator(current)
            touch(current, now)
            self._save(items)
            return current.model_copy(deep=True)

    def remove(self, entity_id: str) -> T:
        with self._lock:
            items = self._load()
            entity = items.pop(entity_id, None)
            if entity is None:
                raise NotFoundError(self.entity_name, entity_id)
            self._save(items)
        logger.debug("%s removed from %s: %s", self.entity_name, self._path, entity_id)
        return entity


class JsonFileStore(EntityStore):
    def __init__(self, data_dir: str) -> None:
        root = Path(data_dir)
        self.users = JsonFileRepository(root / "users.json", User, "User")
        self.photographers = JsonFileRepository(
            root / "photographers.json", Photographer, "Photographer"
        )
        self.bookings = JsonFileRepository(root / "bookings.json", Booking, "Booking")
        self.feedback = JsonFileRepository(root / "feedback.json", Feedback, "Feedback")
