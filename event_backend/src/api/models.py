from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class EventEntity(TypedDict):
    """
    A lightweight domain model representing a calendar Event as stored by the
    repository backends.

    Fields:
    - id: Unique integer identifier, assigned by the store
    - title: Non-blank title, stored exactly as sent
    - description: Optional free text
    - start_date_time: Wall-clock start (naive datetime)
    - end_date_time: Wall-clock end (naive datetime)
    - is_completed: Completion flag, never None once stored
    """

    id: int
    title: str
    description: Optional[str]
    start_date_time: datetime
    end_date_time: datetime
    is_completed: bool
