"""
Storage backends behind one interface.
"""
from grouptherapy.storage.base import (
    ContentCollection,
    DuplicateRecordError,
    RecordNotFoundError,
    StorageBackend,
    StorageError,
)
from grouptherapy.storage.memory import MemoryStorage
from grouptherapy.storage.database import DatabaseStorage


def create_storage(settings) -> StorageBackend:
    """Pick the backend named by settings.storage_backend."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return DatabaseStorage(settings.database_url, echo=settings.debug)


__all__ = [
    "ContentCollection",
    "DuplicateRecordError",
    "RecordNotFoundError",
    "StorageBackend",
    "StorageError",
    "MemoryStorage",
    "DatabaseStorage",
    "create_storage",
]
