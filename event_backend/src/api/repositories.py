from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from functools import lru_cache
from threading import RLock
from typing import Iterator, List, Optional

from .filters import EventFilter
from .models import EventEntity
from .schemas import EventIn
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for event storage backends."""

    @abstractmethod
    def insert(self, data: EventIn) -> EventEntity:
        """Persist a new event under a freshly assigned id and return it. ``data.id`` is ignored."""

    @abstractmethod
    def find_by_id(self, event_id: int) -> Optional[EventEntity]:
        """Return an EventEntity by id, or None if not found."""

    @abstractmethod
    def exists_by_id(self, event_id: int) -> bool:
        """Return True if an event with this id is stored."""

    @abstractmethod
    def find_all(self) -> List[EventEntity]:
        """Return every stored event. Order is not part of the contract."""

    @abstractmethod
    def delete_by_id(self, event_id: int) -> None:
        """Remove the event if present; silent if absent."""

    @abstractmethod
    def find_filtered(self, event_filter: EventFilter) -> List[EventEntity]:
        """Return the events matching every predicate of ``event_filter``."""

    @abstractmethod
    def save(self, entity: EventEntity) -> EventEntity:
        """Upsert ``entity`` under its own id and return the stored representation."""

    @abstractmethod
    def transaction(self):
        """
        Context manager grouping the calls made inside it into one atomic unit.
        Commits on normal exit and rolls back when the block raises.
        """


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, EventEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def insert(self, data: EventIn) -> EventEntity:
        entity: EventEntity = {
            "id": self._allocate_id(),
            "title": data.title,  # type: ignore[typeddict-item]
            "description": data.description,
            "start_date_time": data.start_date_time,  # type: ignore[typeddict-item]
            "end_date_time": data.end_date_time,  # type: ignore[typeddict-item]
            "is_completed": bool(data.is_completed),
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def find_by_id(self, event_id: int) -> Optional[EventEntity]:
        with self._lock:
            item = self._items.get(event_id)
            return None if item is None else item.copy()

    def exists_by_id(self, event_id: int) -> bool:
        with self._lock:
            return event_id in self._items

    def find_all(self) -> List[EventEntity]:
        with self._lock:
            return [t.copy() for t in self._items.values()]

    def delete_by_id(self, event_id: int) -> None:
        with self._lock:
            self._items.pop(event_id, None)

    def find_filtered(self, event_filter: EventFilter) -> List[EventEntity]:
        with self._lock:
            return [t.copy() for t in self._items.values() if event_filter.matches(t)]

    def save(self, entity: EventEntity) -> EventEntity:
        stored = entity.copy()
        with self._lock:
            self._items[stored["id"]] = stored
            # Keep generated ids ahead of any id saved explicitly
            self._next_id = max(self._next_id, stored["id"] + 1)
        return stored.copy()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            snapshot = {k: v.copy() for k, v in self._items.items()}
            next_id = self._next_id
            try:
                yield
            except BaseException:
                self._items = snapshot
                self._next_id = next_id
                raise


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository configured by settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (standard library sqlite3)
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using SQLite event store at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory event store")
    return InMemoryRepository()
