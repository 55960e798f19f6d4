import logging
from typing import Optional

from lenslink.config import StoreConfig, settings
from lenslink.store.base import EntityStore, Repository
from lenslink.store.file import JsonFileStore
from lenslink.store.memory import MemoryStore

logger = logging.getLogger(__name__)


def create_store(config: Optional[StoreConfig] = None) -> EntityStore:
    """Build the store adapter named by ``STORE_BACKEND``."""
    config = config or settings.store
    if config.backend == "file":
        logger.info("Using JSON file store at %s", config.data_dir)
        return JsonFileStore(config.data_dir)
    if config.backend == "memory":
        logger.info("Using in-memory store")
        return MemoryStore()
    raise ValueError(f"Unknown store backend: {config.backend!r}")


__all__ = [
    "EntityStore", "Repository", "MemoryStore", "JsonFileStore", "create_store",
]
