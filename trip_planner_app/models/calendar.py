"""
Derived calendar structures: resolved day locations, legend rows and diagnostics.

None of these are persisted. They are rebuilt from the trips and subtrips in
memory whenever those change.
"""
from dataclasses import dataclass
from typing import Any, Optional


class ValidationError(ValueError):
    """Raised when an entity's date cannot be parsed into a calendar date."""

    def __init__(self, message: str, entity_id: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.entity_id = entity_id
        self.value = value


@dataclass(frozen=True)
class DayLocationRecord:
    """Owner of a calendar date before a color has been assigned."""
    location: str
    is_trip: bool
    owner_id: str


@dataclass(frozen=True)
class DayLocation:
    """
    Resolved location for a single calendar date.

    Attributes:
        location (str): Trip destination or subtrip location name
        is_trip (bool): True when the date is only covered by a trip
        owner_id (str): Identifier of the trip or subtrip owning the date
        color (str): Display color (#RRGGBB)
    """
    location: str
    is_trip: bool
    owner_id: str
    color: str


@dataclass(frozen=True)
class LegendEntry:
    """One row of the calendar legend."""
    location: str
    color: str
    is_trip: bool
    owner_id: str


@dataclass(frozen=True)
class SkippedEntity:
    """An entity left out of the day map because its dates could not be parsed."""
    entity_id: str
    is_trip: bool
    reason: str
