from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..exceptions import EventNotFoundError
from ..repositories import Repository, get_repository
from ..schemas import ErrorBody, EventIn, EventOut
from ..services import EventService
from ..validation import ensure_valid

router = APIRouter(
    prefix="/events",
    tags=["events"],
)


def get_event_service(repo: Repository = Depends(get_repository)) -> EventService:
    """
    Dependency building the service around the process-wide repository.
    """
    return EventService(repo)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[EventOut],
    summary="List Events",
    description=(
        "List events, optionally filtered. All filters are combined with AND.\n\n"
        "Query parameters:\n"
        "- startDate: events starting on or after this day (YYYY-MM-DD)\n"
        "- endDate: events ending on or before the end of this day (YYYY-MM-DD)\n"
        "- title: case-insensitive substring of the title\n"
        "- description: case-insensitive substring of the description\n"
        "- isCompleted: completion status\n\n"
        "Empty title or description values are ignored."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"model": ErrorBody, "description": "Invalid query parameters"},
    },
)
def list_events(
    start_date: Optional[date] = Query(None, alias="startDate", description="Earliest start day"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Latest end day"),
    title: Optional[str] = Query(None, description="Search text for the title"),
    description: Optional[str] = Query(None, description="Search text for the description"),
    is_completed: Optional[bool] = Query(None, alias="isCompleted", description="Filter by completion status"),
    service: EventService = Depends(get_event_service),
) -> List[EventOut]:
    """
    List all events, or the filtered subset when any filter parameter is present.
    """
    filters = (start_date, end_date, title, description, is_completed)
    if all(f is None for f in filters):
        events = service.get_all_events()
    else:
        events = service.get_filtered_events(
            start_date=start_date,
            end_date=end_date,
            title=title,
            description=description,
            is_completed=is_completed,
        )
    return [EventOut(**e) for e in events]


# PUBLIC_INTERFACE
@router.get(
    "/{event_id}",
    response_model=EventOut,
    summary="Get Event",
    description="Get a single event by ID.",
    responses={
        200: {"description": "Event found"},
        404: {"model": ErrorBody, "description": "Event not found"},
    },
)
def get_event(event_id: int, service: EventService = Depends(get_event_service)) -> EventOut:
    event = service.get_event_by_id(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return EventOut(**event)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=EventOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
    description="Create a new event and return it with its assigned ID. Any ID in the body is ignored.",
    responses={
        201: {"description": "Event created successfully"},
        400: {"model": ErrorBody, "description": "Validation error"},
    },
)
def create_event(payload: EventIn, service: EventService = Depends(get_event_service)) -> EventOut:
    created = service.create_event(ensure_valid(payload))
    return EventOut(**created)


# PUBLIC_INTERFACE
@router.put(
    "/{event_id}",
    response_model=EventOut,
    summary="Replace Event",
    description=(
        "Replace every field of an existing event. The path ID wins over any ID in the body; "
        "omitted optional fields are reset (description to null, isCompleted to false)."
    ),
    responses={
        200: {"description": "Event updated"},
        400: {"model": ErrorBody, "description": "Validation error"},
        404: {"model": ErrorBody, "description": "Event not found"},
    },
)
def update_event(
    event_id: int, payload: EventIn, service: EventService = Depends(get_event_service)
) -> EventOut:
    updated = service.update_event(event_id, ensure_valid(payload))
    return EventOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Event",
    description="Delete an event by ID.",
    responses={
        204: {"description": "Event deleted"},
        404: {"model": ErrorBody, "description": "Event not found"},
    },
)
def delete_event(event_id: int, service: EventService = Depends(get_event_service)) -> None:
    """
    Delete an event. Returns 204 on success, 404 if not found.
    """
    service.delete_event(event_id)
    return None


# PUBLIC_INTERFACE
@router.patch(
    "/{event_id}/complete",
    response_model=EventOut,
    summary="Set Completion",
    description="Set the completion flag of an event. No other field changes.",
    responses={
        200: {"description": "Event updated"},
        400: {"model": ErrorBody, "description": "isCompleted missing or not a boolean"},
        404: {"model": ErrorBody, "description": "Event not found"},
    },
)
def update_completion(
    event_id: int,
    is_completed: bool = Query(..., alias="isCompleted", description="New completion status"),
    service: EventService = Depends(get_event_service),
) -> EventOut:
    updated = service.update_completion(event_id, is_completed)
    return EventOut(**updated)
