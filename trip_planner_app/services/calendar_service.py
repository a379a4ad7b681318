"""
Service layer combining day resolution and color assignment for the calendar.
"""
import hashlib
import json
import logging
from datetime import date
from typing import List, Optional, Sequence, Set, Tuple

import streamlit as st

from trip_planner_app.config import CALENDAR_CACHE_SIZE
from trip_planner_app.models.calendar import DayLocation, LegendEntry, SkippedEntity, ValidationError
from trip_planner_app.models.trip import Trip, Subtrip
from trip_planner_app.services.color_service import ColorAssigner
from trip_planner_app.services.date_resolver import (
    DateLike,
    DateLocationResolver,
    iter_calendar_dates,
    parse_calendar_date,
)

logger = logging.getLogger(__name__)


class CalendarService:
    """
    Answers the calendar's questions for one set of trips and subtrips:
    which location owns a day, what color a location is drawn in, and
    what goes in the legend.
    """

    def __init__(self, trips: Sequence[Trip], subtrips: Sequence[Subtrip]):
        self.trips = tuple(trips)
        self.subtrips = tuple(subtrips)
        self.resolver = DateLocationResolver(self.trips, self.subtrips)
        self.colors = ColorAssigner(self.trips, self.subtrips)

    @property
    def skipped(self) -> List[SkippedEntity]:
        """Entities left out of the calendar because their dates are malformed."""
        return list(self.resolver.skipped)

    def resolve_day_location(self, day: DateLike) -> Optional[DayLocation]:
        """
        Resolve the location and color for a calendar date.

        Args:
            day: The date to look up (date or YYYY-MM-DD string)

        Returns:
            DayLocation or None when nothing covers the date
        """
        record = self.resolver.resolve(day)
        if record is None:
            return None
        return DayLocation(
            location=record.location,
            is_trip=record.is_trip,
            owner_id=record.owner_id,
            color=self.color_for(record.location, record.is_trip, record.owner_id)
        )

    def color_for(self, location: str, is_trip: bool, owner_id: str) -> str:
        return self.colors.color_for(location, is_trip, owner_id)

    def legend_entries(self) -> List[LegendEntry]:
        """
        Build the calendar legend.

        Returns:
            List[LegendEntry]: One entry per distinct trip destination and per
                distinct subtrip location, trips first. When several entities
                share a location name the first one in input order is used.
        """
        entries: List[LegendEntry] = []
        seen: Set[Tuple[bool, str]] = set()

        candidates = [(trip.destination, True, trip.id) for trip in self.trips]
        candidates += [(subtrip.location, False, subtrip.id) for subtrip in self.subtrips]

        for location, is_trip, owner_id in candidates:
            if (is_trip, location) in seen:
                continue
            seen.add((is_trip, location))
            entries.append(LegendEntry(
                location=location,
                color=self.color_for(location, is_trip, owner_id),
                is_trip=is_trip,
                owner_id=owner_id
            ))
        return entries

    def visible_days(self) -> List[date]:
        """
        Get every date from the earliest trip start to the latest trip end.

        Returns:
            List[date]: The dates in order, empty when there are no usable trips
        """
        bounds = []
        for trip in self.trips:
            try:
                bounds.append(parse_calendar_date(trip.start_date, trip.id))
                bounds.append(parse_calendar_date(trip.end_date, trip.id))
            except ValidationError:
                continue
        if not bounds:
            return []
        return list(iter_calendar_dates(min(bounds), max(bounds)))


def fingerprint(trips: Sequence[Trip], subtrips: Sequence[Subtrip]) -> str:
    """Content hash of the inputs, used as the calendar cache key."""
    payload = json.dumps(
        {
            "trips": [trip.to_dict() for trip in trips],
            "subtrips": [subtrip.to_dict() for subtrip in subtrips],
        },
        sort_keys=True,
        default=str,
    )
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


@st.cache_resource(max_entries=CALENDAR_CACHE_SIZE, show_spinner=False)
def _cached_calendar_service(key: str, _trips: Tuple[Trip, ...], _subtrips: Tuple[Subtrip, ...]) -> CalendarService:
    # Only the content key is hashed, the underscored arguments are not
    logger.debug(f"Building calendar service for {key[:8]}")
    return CalendarService(_trips, _subtrips)


def get_calendar_service(trips: Sequence[Trip], subtrips: Sequence[Subtrip]) -> CalendarService:
    """
    Get a CalendarService for the given inputs, reusing a cached one when the
    content is unchanged. The cache is shared across sessions and threads.

    Args:
        trips: Trips to resolve
        subtrips: Subtrips to resolve, in application order

    Returns:
        CalendarService: Service for these inputs
    """
    return _cached_calendar_service(fingerprint(trips, subtrips), tuple(trips), tuple(subtrips))


def clear_calendar_cache() -> None:
    _cached_calendar_service.clear()
