from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Tuple, Union

from .models import EventEntity


@dataclass(frozen=True)
class StartsOnOrAfter:
    """Event starts at or after ``at``."""

    at: datetime

    def matches(self, event: EventEntity) -> bool:
        return event["start_date_time"] >= self.at


@dataclass(frozen=True)
class EndsOnOrBefore:
    """Event ends at or before ``at``."""

    at: datetime

    def matches(self, event: EventEntity) -> bool:
        return event["end_date_time"] <= self.at


@dataclass(frozen=True)
class TitleContains:
    """Case-insensitive substring match on the title. ``text`` is stored lower-cased."""

    text: str

    def matches(self, event: EventEntity) -> bool:
        return self.text in event["title"].lower()


@dataclass(frozen=True)
class DescriptionContains:
    """Case-insensitive substring match on the description; a null description never matches."""

    text: str

    def matches(self, event: EventEntity) -> bool:
        description = event["description"]
        return description is not None and self.text in description.lower()


@dataclass(frozen=True)
class CompletionIs:
    value: bool

    def matches(self, event: EventEntity) -> bool:
        return event["is_completed"] == self.value


Predicate = Union[StartsOnOrAfter, EndsOnOrBefore, TitleContains, DescriptionContains, CompletionIs]


@dataclass(frozen=True)
class EventFilter:
    """
    Conjunction of predicates. An empty filter matches every event.
    """

    predicates: Tuple[Predicate, ...] = ()

    def matches(self, event: EventEntity) -> bool:
        return all(p.matches(event) for p in self.predicates)

    def __bool__(self) -> bool:
        return bool(self.predicates)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    """Last representable instant of ``d``."""
    return datetime.combine(d, time.max)


# PUBLIC_INTERFACE
def build_filter(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    is_completed: Optional[bool] = None,
) -> EventFilter:
    """
    Compose an EventFilter from optional query values.

    Absent values and empty strings contribute no predicate.
    """
    predicates: list = []
    if start_date is not None:
        predicates.append(StartsOnOrAfter(start_of_day(start_date)))
    if end_date is not None:
        predicates.append(EndsOnOrBefore(end_of_day(end_date)))
    if title:
        predicates.append(TitleContains(title.lower()))
    if description:
        predicates.append(DescriptionContains(description.lower()))
    if is_completed is not None:
        predicates.append(CompletionIs(is_completed))
    return EventFilter(tuple(predicates))
