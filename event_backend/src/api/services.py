"""
Event service: the domain layer between the HTTP routers and the stores.

The service is the only caller of the repository. It composes filter
predicates, raises ``EventNotFoundError`` for unknown ids and runs every
mutation of an existing event inside ``Repository.transaction()``. It has no
knowledge of HTTP status codes.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from .exceptions import EventNotFoundError
from .filters import build_filter
from .models import EventEntity
from .repositories import Repository
from .schemas import EventIn

logger = logging.getLogger(__name__)


class EventService:
    """Domain operations on calendar events."""

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def create_event(self, data: EventIn) -> EventEntity:
        """Store a new event; any client-supplied id is ignored."""
        created = self._repository.insert(data.model_copy(update={"id": None}))
        logger.info("Created event %s '%s'", created["id"], created["title"])
        return created

    def get_all_events(self) -> List[EventEntity]:
        return self._repository.find_all()

    def get_event_by_id(self, event_id: int) -> Optional[EventEntity]:
        return self._repository.find_by_id(event_id)

    def update_event(self, event_id: int, data: EventIn) -> EventEntity:
        """
        Replace every mutable field of the event at ``event_id``.

        The stored id is always the path id, whatever ``data.id`` says.

        Raises:
            EventNotFoundError: if no event has this id.
        """
        with self._repository.transaction():
            if not self._repository.exists_by_id(event_id):
                logger.warning("Update rejected, event %s not found", event_id)
                raise EventNotFoundError(event_id)
            entity: EventEntity = {
                "id": event_id,
                "title": data.title,  # type: ignore[typeddict-item]
                "description": data.description,
                "start_date_time": data.start_date_time,  # type: ignore[typeddict-item]
                "end_date_time": data.end_date_time,  # type: ignore[typeddict-item]
                "is_completed": bool(data.is_completed),
            }
            updated = self._repository.save(entity)
        logger.info("Updated event %s", event_id)
        return updated

    def delete_event(self, event_id: int) -> None:
        """
        Raises:
            EventNotFoundError: if no event has this id.
        """
        with self._repository.transaction():
            if not self._repository.exists_by_id(event_id):
                logger.warning("Delete rejected, event %s not found", event_id)
                raise EventNotFoundError(event_id)
            self._repository.delete_by_id(event_id)
        logger.info("Deleted event %s", event_id)

    def update_completion(self, event_id: int, is_completed: bool) -> EventEntity:
        """
        Set only the completion flag; every other field is preserved.

        Raises:
            EventNotFoundError: if no event has this id.
        """
        with self._repository.transaction():
            entity = self._repository.find_by_id(event_id)
            if entity is None:
                logger.warning("Completion update rejected, event %s not found", event_id)
                raise EventNotFoundError(event_id)
            entity["is_completed"] = is_completed
            updated = self._repository.save(entity)
        logger.info("Event %s marked %s", event_id, "completed" if is_completed else "open")
        return updated

    def get_filtered_events(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        is_completed: Optional[bool] = None,
    ) -> List[EventEntity]:
        """Return the events matching every supplied, non-empty filter value."""
        event_filter = build_filter(start_date, end_date, title, description, is_completed)
        logger.debug("Filtering events with %s", event_filter)
        return self._repository.find_filtered(event_filter)
