from __future__ import annotations

from typing import List

from .schemas import FieldError


class EventCalendarError(Exception):
    """Base class for domain failures raised by the service and stores."""


class EventNotFoundError(EventCalendarError):
    """Raised when a referenced Event id does not exist."""

    def __init__(self, event_id: int) -> None:
        self.event_id = event_id
        super().__init__(f"Event not found with ID: {event_id}")


class EventValidationError(EventCalendarError):
    """Raised when a request body fails one or more field constraints."""

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(e.field for e in errors)
        super().__init__(f"Invalid fields: {fields}")


class StorageError(EventCalendarError):
    """Raised when the store backend fails to read or write."""
