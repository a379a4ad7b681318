"""
Models for itinerary items scheduled within a trip.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any

from trip_planner_app.config import ITINERARY_ITEM_TYPES


@dataclass
class ItineraryItem:
    """
    Represents a scheduled event (flight, meal, activity, ...) within a trip.

    Attributes:
        id (str): Unique identifier of the item
        trip_id (str): Identifier of the owning trip
        subtrip_id (Optional[str]): Identifier of the subtrip the item belongs to
        type (str): One of the keys of ITINERARY_ITEM_TYPES
        title (str): Short title
        location (Optional[str]): Free-text location
        start_time (str): ISO date-time the item starts at
        end_time (Optional[str]): ISO date-time the item ends at
        notes (Optional[str]): Free-text notes
        cost (Optional[float]): Monetary cost
        currency (Optional[str]): ISO currency code for the cost
    """
    id: str
    trip_id: str
    type: str
    title: str
    start_time: str
    subtrip_id: Optional[str] = None
    location: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None
    cost: Optional[float] = None
    currency: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def day_key(self) -> str:
        """Calendar date (YYYY-MM-DD) the item starts on."""
        return str(self.start_time)[:10]

    @property
    def type_label(self) -> str:
        return ITINERARY_ITEM_TYPES.get(self.type, self.type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ItineraryItem':
        """
        Create an ItineraryItem instance from a dictionary.

        Args:
            data (Dict): Dictionary containing item data, usually a database row

        Returns:
            ItineraryItem: A new ItineraryItem instance populated with the data

        Raises:
            ValueError: If the item type is not a known itinerary type
        """
        item_type = data.get('type')
        if item_type not in ITINERARY_ITEM_TYPES:
            raise ValueError(f"Unknown itinerary item type: {item_type!r}")

        cost = data.get('cost')
        return cls(
            id=data['id'],
            trip_id=data.get('trip_id', ''),
            type=item_type,
            title=data.get('title', ''),
            start_time=data.get('start_time'),
            subtrip_id=data.get('subtrip_id') or None,
            location=data.get('location') or None,
            end_time=data.get('end_time') or None,
            notes=data.get('notes') or None,
            cost=float(cost) if cost is not None else None,
            currency=data.get('currency') or None,
            created_at=data.get('created_at', ''),
            updated_at=data.get('updated_at', '')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the ItineraryItem instance to a dictionary."""
        return asdict(self)
