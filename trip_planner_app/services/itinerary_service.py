"""
Helpers for laying out itinerary items across the days of a trip.
"""
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence

from trip_planner_app.config import DROP_TIME_OF_DAY
from trip_planner_app.models.calendar import ValidationError
from trip_planner_app.models.itinerary import ItineraryItem
from trip_planner_app.services.date_resolver import (
    DateLike,
    format_calendar_date,
    parse_calendar_date,
    parse_timestamp,
)

logger = logging.getLogger(__name__)


def group_items_by_day(items: Sequence[ItineraryItem]) -> Dict[str, List[ItineraryItem]]:
    """
    Bucket itinerary items by the calendar date they start on.

    Args:
        items: Itinerary items in any order

    Returns:
        Dict mapping YYYY-MM-DD to the items of that day, sorted by start time
    """
    days: Dict[str, List[ItineraryItem]] = defaultdict(list)
    for item in items:
        try:
            key = format_calendar_date(parse_calendar_date(item.start_time, item.id))
        except ValidationError as e:
            logger.warning(f"Skipping itinerary item {item.id}: {e}")
            continue
        days[key].append(item)

    for day_items in days.values():
        day_items.sort(key=lambda item: item.start_time)
    return dict(days)


def _moved_end_time(item: ItineraryItem, start_time: str) -> Optional[str]:
    # Keeps the item's duration; an end time that cannot be read is left as is
    if not item.end_time:
        return item.end_time
    try:
        duration = parse_timestamp(item.end_time) - parse_timestamp(item.start_time)
    except (TypeError, ValueError) as e:
        logger.warning(f"Keeping end time of itinerary item {item.id} unchanged: {e}")
        return item.end_time
    return (parse_timestamp(start_time) + duration).isoformat()


def reassign_item_day(item: ItineraryItem, day: DateLike) -> ItineraryItem:
    """
    Move an itinerary item to another day, as done by dropping it on a day card.

    The item is moved to noon of the target day and keeps its duration, so
    an end time is moved along with it. An item already on that day is
    returned unchanged.

    Args:
        item: The item being moved
        day: Target calendar date

    Returns:
        ItineraryItem: A new item with the updated start and end times

    Raises:
        ValidationError: If the target day cannot be parsed
    """
    target = format_calendar_date(parse_calendar_date(day))
    if item.day_key == target:
        return item
    logger.info(f"Moving itinerary item {item.id} from {item.day_key} to {target}")
    start_time = f"{target}T{DROP_TIME_OF_DAY}"
    return replace(item, start_time=start_time, end_time=_moved_end_time(item, start_time))


def most_recent_item(items: Sequence[ItineraryItem]) -> Optional[ItineraryItem]:
    """Get the most recently created item, or None if there are none."""
    if not items:
        return None
    return max(items, key=lambda item: item.created_at or "")


def day_status(day: date, today: Optional[date] = None) -> str:
    """Classify a day as "past", "today" or "future" relative to today."""
    today = today or date.today()
    if day < today:
        return "past"
    if day > today:
        return "future"
    return "today"


def total_cost_by_currency(items: Sequence[ItineraryItem]) -> Dict[str, float]:
    """Sum item costs per currency. Items without a cost are ignored."""
    totals: Dict[str, float] = defaultdict(float)
    for item in items:
        if item.cost is None:
            continue
        totals[item.currency or "N/A"] += item.cost
    return dict(totals)
