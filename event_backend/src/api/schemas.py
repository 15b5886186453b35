from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, NaiveDatetime, field_validator
from pydantic.alias_generators import to_camel


# PUBLIC_INTERFACE
class EventIn(BaseModel):
    """
    Request body for creating (POST) or replacing (PUT) an Event.

    Required fields are optional at this level; ``validation.py`` checks
    them and reports every missing or blank field at once. Only structural
    problems (wrong JSON types, unparsable or zoned timestamps) are rejected
    by pydantic itself.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Meeting",
                "description": "Team",
                "startDateTime": "2025-07-10T09:00:00",
                "endDateTime": "2025-07-10T10:00:00",
                "isCompleted": False,
            }
        },
    )

    id: Optional[int] = Field(default=None, description="Ignored on create; replaced by the path id on update")
    title: Optional[str] = Field(default=None, description="Event title, must not be blank")
    description: Optional[str] = Field(default=None, description="Optional free-text description")
    start_date_time: Optional[NaiveDatetime] = Field(
        default=None, description="Wall-clock start, ISO8601 without offset (YYYY-MM-DDTHH:MM:SS)"
    )
    end_date_time: Optional[NaiveDatetime] = Field(
        default=None, description="Wall-clock end, ISO8601 without offset (YYYY-MM-DDTHH:MM:SS)"
    )
    is_completed: bool = Field(default=False, description="Completion flag, false when omitted")

    @field_validator("is_completed", mode="before")
    @classmethod
    def default_completion(cls, v: Any) -> Any:
        """An explicit null is stored as not completed."""
        return False if v is None else v

    @field_validator("start_date_time", "end_date_time")
    @classmethod
    def drop_fractional_seconds(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Events are scheduled to the second; fractions are truncated."""
        return v.replace(microsecond=0) if v is not None else v


# PUBLIC_INTERFACE
class EventOut(BaseModel):
    """
    Schema returned by the API for an Event.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Meeting",
                "description": "Team",
                "startDateTime": "2025-07-10T09:00:00",
                "endDateTime": "2025-07-10T10:00:00",
                "isCompleted": False,
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the event")
    title: str = Field(..., description="Event title")
    description: Optional[str] = Field(default=None, description="Optional description, null when absent")
    start_date_time: datetime = Field(..., description="Wall-clock start")
    end_date_time: datetime = Field(..., description="Wall-clock end")
    is_completed: bool = Field(..., description="Completion flag")


# PUBLIC_INTERFACE
class FieldError(BaseModel):
    """A single failed constraint on a request field."""

    field: str = Field(..., description="Wire name of the offending field")
    message: str = Field(..., description="Human-readable description of the failure")


# PUBLIC_INTERFACE
class ErrorBody(BaseModel):
    """JSON body of every non-2xx response produced by the service."""

    error: str = Field(..., description="Error kind, e.g. ValidationError or NotFound")
    message: str = Field(..., description="Human-readable summary")
    detail: Optional[List[Any]] = Field(default=None, description="Per-field details for validation failures")
