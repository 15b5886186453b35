from __future__ import annotations

from typing import List

from .exceptions import EventValidationError
from .schemas import EventIn, FieldError


# PUBLIC_INTERFACE
def collect_field_errors(payload: EventIn) -> List[FieldError]:
    """
    Check an Event request body against the entity constraints.

    Returns one FieldError per failed constraint, keyed by the wire field name;
    an empty list means the payload is acceptable.
    """
    errors: List[FieldError] = []
    if payload.title is None or not payload.title.strip():
        errors.append(FieldError(field="title", message="Title is mandatory and cannot be empty"))
    if payload.start_date_time is None:
        errors.append(FieldError(field="startDateTime", message="Start date and time are mandatory"))
    if payload.end_date_time is None:
        errors.append(FieldError(field="endDateTime", message="End date and time are mandatory"))
    return errors


# PUBLIC_INTERFACE
def ensure_valid(payload: EventIn) -> EventIn:
    """Return the payload unchanged, or raise EventValidationError listing every failure."""
    errors = collect_field_errors(payload)
    if errors:
        raise EventValidationError(errors)
    return payload
