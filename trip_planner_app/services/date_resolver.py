"""
Resolution of calendar dates to the trip or subtrip that owns them.

Trips are applied first and cover their whole span. Subtrips are applied
afterwards, in the order given, and overwrite whatever they cover. Among
overlapping subtrips the last one in the list wins.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from trip_planner_app.config import DATE_FORMAT
from trip_planner_app.models.calendar import (
    DayLocationRecord,
    SkippedEntity,
    ValidationError,
)
from trip_planner_app.models.trip import Trip, Subtrip

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def parse_timestamp(value: str) -> datetime:
    """
    Parse a YYYY-MM-DD date or a full ISO 8601 timestamp.

    A trailing "Z" is read as UTC. Anything else after the date must be a
    valid ISO time part.

    Raises:
        ValueError: If the string is not a date or an ISO timestamp
    """
    text = value.strip()
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        pass
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_calendar_date(value: DateLike, entity_id: Optional[str] = None) -> date:
    """
    Convert a date-like value into a calendar date.

    Strings must be a plain YYYY-MM-DD date or a full ISO timestamp; the
    calendar date of the timestamp is used as written, without timezone
    conversion.

    Args:
        value: A date, a datetime or a date/timestamp string
        entity_id: Identifier of the owning entity, carried by the error

    Returns:
        date: The calendar date

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_timestamp(value).date()
        except ValueError:
            pass
    raise ValidationError(f"Invalid calendar date: {value!r}", entity_id=entity_id, value=value)


def format_calendar_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def iter_calendar_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive. Yields nothing if end < start."""
    span = (end - start).days
    for offset in range(span + 1):
        yield start + timedelta(days=offset)


def _entity_range(entity: Union[Trip, Subtrip]) -> Tuple[date, date]:
    start = parse_calendar_date(entity.start_date, entity.id)
    end = parse_calendar_date(entity.end_date, entity.id)
    return start, end


def _apply(
    day_map: Dict[str, DayLocationRecord],
    skipped: List[SkippedEntity],
    entity: Union[Trip, Subtrip],
    location: str,
    is_trip: bool,
) -> None:
    try:
        start, end = _entity_range(entity)
    except ValidationError as e:
        kind = "trip" if is_trip else "subtrip"
        logger.warning(f"Skipping {kind} {entity.id}: {e}")
        skipped.append(SkippedEntity(entity_id=entity.id, is_trip=is_trip, reason=str(e)))
        return

    record = DayLocationRecord(location=location, is_trip=is_trip, owner_id=entity.id)
    for day in iter_calendar_dates(start, end):
        day_map[format_calendar_date(day)] = record


def build_day_location_map(
    trips: Sequence[Trip],
    subtrips: Sequence[Subtrip],
) -> Tuple[Dict[str, DayLocationRecord], List[SkippedEntity]]:
    """
    Build the date to location mapping for a set of trips and subtrips.

    Args:
        trips: Trips, each covering its whole date range with its destination
        subtrips: Subtrips, applied in list order after all trips

    Returns:
        Tuple of the mapping (keyed by YYYY-MM-DD) and the entities skipped
        because their dates could not be parsed
    """
    day_map: Dict[str, DayLocationRecord] = {}
    skipped: List[SkippedEntity] = []

    for trip in trips:
        _apply(day_map, skipped, trip, trip.destination, True)

    for subtrip in subtrips:
        _apply(day_map, skipped, subtrip, subtrip.location, False)

    logger.debug(
        f"Resolved {len(day_map)} days from {len(trips)} trips and "
        f"{len(subtrips)} subtrips ({len(skipped)} skipped)")
    return day_map, skipped


class DateLocationResolver:
    """
    Day to location lookup over a fixed set of trips and subtrips.

    The inputs are copied into tuples, so later changes to the caller's lists
    do not affect an existing resolver; build a new one instead.
    """

    def __init__(self, trips: Sequence[Trip], subtrips: Sequence[Subtrip]):
        self.trips = tuple(trips)
        self.subtrips = tuple(subtrips)
        self._day_map, self.skipped = build_day_location_map(self.trips, self.subtrips)

    def resolve(self, day: DateLike) -> Optional[DayLocationRecord]:
        """
        Get the owner of a calendar date.

        Args:
            day: The date to look up

        Returns:
            DayLocationRecord or None when no trip or subtrip covers the date

        Raises:
            ValidationError: If the queried date cannot be parsed
        """
        key = format_calendar_date(parse_calendar_date(day))
        return self._day_map.get(key)

    def covered_dates(self) -> List[str]:
        return sorted(self._day_map)

    def __len__(self) -> int:
        return len(self._day_map)
