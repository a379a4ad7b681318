"""
Service layer for trips, subtrips and itinerary items.
"""
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from trip_planner_app.config import ITINERARY_ITEM_TYPES
from trip_planner_app.models.calendar import ValidationError
from trip_planner_app.models.itinerary import ItineraryItem
from trip_planner_app.models.trip import Trip, Subtrip, TripBundle
from trip_planner_app.services.database_service import DatabaseService
from trip_planner_app.services.date_resolver import DateLike, parse_calendar_date
from trip_planner_app.services.itinerary_service import reassign_item_day
from trip_planner_app.services.singleton import singleton_session

logger = logging.getLogger(__name__)


def _validate_range(values: Dict[str, Any]) -> None:
    try:
        start = parse_calendar_date(values.get("start_date"))
        end = parse_calendar_date(values.get("end_date"))
    except ValidationError as e:
        raise ValueError(str(e)) from e
    if start > end:
        raise ValueError("End date must be on or after start date.")
    values["start_date"] = start.isoformat()
    values["end_date"] = end.isoformat()


@singleton_session("service")
class TripService:
    """
    Service for reading and writing trips and their content.

    Input is validated here before it reaches the database. Storage errors are
    logged and re-raised as RuntimeError.
    """

    def __init__(self, db_service: Optional[DatabaseService] = None):
        """
        Initialize the TripService.

        Args:
            db_service: Database to use, a default DatabaseService when omitted
        """
        self.db_service = db_service or DatabaseService()

    def _run(self, action: str, func, *args):
        try:
            return func(*args)
        except sqlite3.Error as e:
            logger.error(f"Error during {action}: {str(e)}", exc_info=True)
            raise RuntimeError(f"Error during {action}: {str(e)}")

    # Trips

    def create_trip(self, user_id: str, values: Dict[str, Any]) -> Trip:
        """
        Create a trip for a user.

        Args:
            user_id: Owning user
            values: Trip fields (title, destination, start_date, end_date, ...)

        Returns:
            Trip: The stored trip

        Raises:
            ValueError: If the title or destination is empty or the dates are invalid
        """
        values = dict(values, user_id=user_id)
        if not (values.get("title") or "").strip():
            raise ValueError("Trip title is required.")
        if not (values.get("destination") or "").strip():
            raise ValueError("Trip destination is required.")
        _validate_range(values)

        row = self._run("create trip", self.db_service.create_trip, values)
        logger.info(f"Created trip {row['id']} to {row['destination']}")
        return Trip.from_dict(row)

    def list_trips(self, user_id: str) -> List[Trip]:
        rows = self._run("list trips", self.db_service.list_trips, user_id)
        return [Trip.from_dict(row) for row in rows]

    def get_trip(self, trip_id: str) -> Optional[Trip]:
        row = self._run("get trip", self.db_service.get_trip, trip_id)
        return Trip.from_dict(row) if row else None

    def update_trip(self, trip_id: str, updates: Dict[str, Any]) -> Optional[Trip]:
        """Update a trip, re-validating its dates when either of them changes."""
        if "start_date" in updates or "end_date" in updates:
            current = self.get_trip(trip_id)
            if current is None:
                return None
            updates = dict(updates)
            updates.setdefault("start_date", current.start_date)
            updates.setdefault("end_date", current.end_date)
            _validate_range(updates)
        row = self._run("update trip", self.db_service.update_trip, trip_id, updates)
        return Trip.from_dict(row) if row else None

    def delete_trip(self, trip_id: str) -> bool:
        return self._run("delete trip", self.db_service.delete_trip, trip_id)

    # Subtrips

    def create_subtrip(self, trip_id: str, values: Dict[str, Any]) -> Subtrip:
        """
        Add a location to a trip.

        The order index defaults to the number of existing subtrips. Dates
        outside the trip's range are accepted but logged.

        Raises:
            ValueError: If the location is empty or the dates are invalid
        """
        values = dict(values, trip_id=trip_id)
        if not (values.get("location") or "").strip():
            raise ValueError("Location is required.")
        _validate_range(values)

        if values.get("order_index") is None:
            values["order_index"] = len(self._run("list subtrips", self.db_service.list_subtrips, trip_id))

        trip = self.get_trip(trip_id)
        if trip and (values["start_date"] < trip.start_date or values["end_date"] > trip.end_date):
            logger.warning(f"Subtrip {values['location']} extends outside trip {trip_id}")

        row = self._run("create subtrip", self.db_service.create_subtrip, values)
        return Subtrip.from_dict(row)

    def list_subtrips(self, trip_id: str) -> List[Subtrip]:
        rows = self._run("list subtrips", self.db_service.list_subtrips, trip_id)
        return [Subtrip.from_dict(row) for row in rows]

    def update_subtrip(self, subtrip_id: str, updates: Dict[str, Any]) -> Optional[Subtrip]:
        if "start_date" in updates or "end_date" in updates:
            current = self._run("get subtrip", self.db_service.get_subtrip, subtrip_id)
            if current is None:
                return None
            updates = dict(updates)
            updates.setdefault("start_date", current["start_date"])
            updates.setdefault("end_date", current["end_date"])
            _validate_range(updates)
        row = self._run("update subtrip", self.db_service.update_subtrip, subtrip_id, updates)
        return Subtrip.from_dict(row) if row else None

    def delete_subtrip(self, subtrip_id: str) -> bool:
        return self._run("delete subtrip", self.db_service.delete_subtrip, subtrip_id)

    # Itinerary items

    def create_item(self, trip_id: str, values: Dict[str, Any]) -> ItineraryItem:
        """
        Add an itinerary item to a trip.

        Raises:
            ValueError: If the type is unknown, the title is empty or the start time is invalid
        """
        values = dict(values, trip_id=trip_id)
        if values.get("type") not in ITINERARY_ITEM_TYPES:
            raise ValueError(f"Unknown itinerary item type: {values.get('type')!r}")
        if not (values.get("title") or "").strip():
            raise ValueError("Item title is required.")
        try:
            parse_calendar_date(values.get("start_time"))
        except ValidationError as e:
            raise ValueError(str(e)) from e

        row = self._run("create itinerary item", self.db_service.create_itinerary_item, values)
        return ItineraryItem.from_dict(row)

    def list_items(self, trip_id: str) -> List[ItineraryItem]:
        rows = self._run("list itinerary items", self.db_service.list_itinerary_items, trip_id)
        items = []
        for row in rows:
            try:
                items.append(ItineraryItem.from_dict(row))
            except ValueError as e:
                logger.warning(f"Skipping itinerary item {row.get('id')}: {e}")
        return items

    def update_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[ItineraryItem]:
        if "type" in updates and updates["type"] not in ITINERARY_ITEM_TYPES:
            raise ValueError(f"Unknown itinerary item type: {updates['type']!r}")
        row = self._run("update itinerary item", self.db_service.update_itinerary_item, item_id, updates)
        return ItineraryItem.from_dict(row) if row else None

    def delete_item(self, item_id: str) -> bool:
        return self._run("delete itinerary item", self.db_service.delete_itinerary_item, item_id)

    def move_item_to_day(self, item: ItineraryItem, day: DateLike) -> ItineraryItem:
        """
        Move an item to another day and persist its new start and end times.

        Args:
            item: The item to move
            day: Target calendar date

        Returns:
            ItineraryItem: The item as stored after the move
        """
        moved = reassign_item_day(item, day)
        if moved is item:
            return item
        stored = self.update_item(item.id, {"start_time": moved.start_time, "end_time": moved.end_time})
        return stored or moved

    def load_bundle(self, trip_id: str) -> Optional[TripBundle]:
        """
        Load a trip with its subtrips and itinerary items.

        Args:
            trip_id: Trip to load

        Returns:
            TripBundle or None if the trip does not exist
        """
        trip = self.get_trip(trip_id)
        if trip is None:
            logger.warning(f"Trip {trip_id} not found")
            return None
        return TripBundle(
            trip=trip,
            subtrips=self.list_subtrips(trip_id),
            items=self.list_items(trip_id)
        )


def get_trip_service():
    """Get a singleton instance of TripService."""
    return TripService()
