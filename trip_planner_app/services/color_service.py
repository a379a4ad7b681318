"""
Color assignment for calendar locations.

Precedence, highest first:

1. the entity's own explicit color
2. the neutral trip color for trips without one
3. an explicit color declared elsewhere for the same location name
4. a palette color picked by hashing location, kind and owner id
"""
import logging
from typing import Dict, Optional, Sequence, Tuple

from trip_planner_app.config import PALETTE, TRIP_FALLBACK_COLOR
from trip_planner_app.models.trip import Trip, Subtrip

logger = logging.getLogger(__name__)

_INT32_RANGE = 1 << 32
_INT32_MAX = 1 << 31


def _to_int32(value: int) -> int:
    return ((value + _INT32_MAX) % _INT32_RANGE) - _INT32_MAX


def string_hash(text: str) -> int:
    """
    Shift-and-add string hash, wrapped to a signed 32-bit integer after each step.

    Args:
        text: The string to hash

    Returns:
        int: Hash value in the signed 32-bit range
    """
    value = 0
    for ch in text:
        value = _to_int32(ord(ch) + ((value << 5) - value))
    return value


def hash_key(location: str, is_trip: bool, owner_id: str) -> str:
    return f"{location}{'trip' if is_trip else 'subtrip'}{owner_id}"


def palette_color(location: str, is_trip: bool, owner_id: str) -> str:
    """Pick a palette color from the location, its kind and its owner id."""
    return PALETTE[abs(string_hash(hash_key(location, is_trip, owner_id))) % len(PALETTE)]


class ColorAssigner:
    """
    Maps calendar locations to display colors for one set of trips and subtrips.

    Explicit colors are indexed once, when the assigner is built. Build a new
    assigner when the trips or subtrips change.
    """

    def __init__(self, trips: Sequence[Trip], subtrips: Sequence[Subtrip]):
        self._entity_colors: Dict[Tuple[bool, str], str] = {}
        self._location_colors: Dict[str, str] = {}

        # Subtrips first so a location name prefers the finer-grained color
        for subtrip in subtrips:
            self._index(subtrip.location, False, subtrip.id, subtrip.color)
        for trip in trips:
            self._index(trip.destination, True, trip.id, trip.color)

        logger.debug(
            f"Indexed {len(self._entity_colors)} explicit colors "
            f"for {len(self._location_colors)} location names")

    def _index(self, location: str, is_trip: bool, owner_id: str, color: Optional[str]) -> None:
        if not color:
            return
        self._entity_colors[(is_trip, owner_id)] = color
        self._location_colors.setdefault(location, color)

    def explicit_color(self, is_trip: bool, owner_id: str) -> Optional[str]:
        return self._entity_colors.get((is_trip, owner_id))

    def color_for(self, location: str, is_trip: bool, owner_id: str) -> str:
        """
        Get the display color for a location.

        Args:
            location: Trip destination or subtrip location name
            is_trip: True for a trip, False for a subtrip
            owner_id: Identifier of the trip or subtrip

        Returns:
            str: A #RRGGBB color
        """
        explicit = self.explicit_color(is_trip, owner_id)
        if explicit:
            return explicit
        if is_trip:
            return TRIP_FALLBACK_COLOR
        cached = self._location_colors.get(location)
        if cached:
            return cached
        return palette_color(location, is_trip, owner_id)
