"""
Models for representing trips and the locations (subtrips) inside them.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Optional, Any

from trip_planner_app.config import DATE_FORMAT


def _inclusive_days(start_date: str, end_date: str) -> int:
    try:
        start = datetime.strptime(str(start_date)[:10], DATE_FORMAT)
        end = datetime.strptime(str(end_date)[:10], DATE_FORMAT)
    except ValueError:
        return 0
    return max((end - start).days + 1, 0)


@dataclass
class Trip:
    """
    Represents a planned trip.

    Attributes:
        id (str): Unique identifier of the trip
        user_id (str): Identifier of the owning user
        title (str): Title shown in trip lists
        destination (str): Free-text destination name
        start_date (str): First day of the trip (YYYY-MM-DD, inclusive)
        end_date (str): Last day of the trip (YYYY-MM-DD, inclusive)
        color (Optional[str]): Explicit calendar color (#RRGGBB)
        emoji (Optional[str]): Optional emoji shown next to the title
        description (Optional[str]): Free-text description

    Properties:
        duration_days (int): Duration of the trip in days
    """
    id: str
    user_id: str
    title: str
    destination: str
    start_date: str
    end_date: str
    color: Optional[str] = None
    emoji: Optional[str] = None
    description: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def duration_days(self) -> int:
        """
        Calculate the duration of the trip in days.

        Returns:
            int: Number of days for the trip (inclusive of start and end dates),
                0 when the range is inverted or cannot be parsed
        """
        return _inclusive_days(self.start_date, self.end_date)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Trip':
        """
        Create a Trip instance from a dictionary.

        Args:
            data (Dict): Dictionary containing trip data, usually a database row

        Returns:
            Trip: A new Trip instance populated with the data
        """
        return cls(
            id=data['id'],
            user_id=data.get('user_id', ''),
            title=data.get('title', ''),
            destination=data.get('destination', ''),
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
            color=data.get('color') or None,
            emoji=data.get('emoji') or None,
            description=data.get('description') or None,
            created_at=data.get('created_at', ''),
            updated_at=data.get('updated_at', '')
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the Trip instance to a dictionary.

        Returns:
            Dict: Dictionary representation of the Trip
        """
        return asdict(self)


@dataclass
class Subtrip:
    """
    Represents a location inside a trip, covering a sub-range of its dates.

    Subtrips may overlap each other. Their dates are expected to fall inside
    the owning trip's range but this is not enforced.
    """
    id: str
    trip_id: str
    location: str
    start_date: str
    end_date: str
    color: Optional[str] = None
    description: Optional[str] = None
    order_index: int = 0
    created_at: str = ""
    updated_at: str = ""

    @property
    def duration_days(self) -> int:
        return _inclusive_days(self.start_date, self.end_date)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Subtrip':
        """Create a Subtrip instance from a dictionary."""
        return cls(
            id=data['id'],
            trip_id=data.get('trip_id', ''),
            location=data.get('location', ''),
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
            color=data.get('color') or None,
            description=data.get('description') or None,
            order_index=data.get('order_index') or 0,
            created_at=data.get('created_at', ''),
            updated_at=data.get('updated_at', '')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the Subtrip instance to a dictionary."""
        return asdict(self)


@dataclass
class TripBundle:
    """A trip together with its subtrips and itinerary items, as loaded for one page."""
    trip: Trip
    subtrips: list = field(default_factory=list)
    items: list = field(default_factory=list)
