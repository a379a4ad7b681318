import pytest

from factories import make_trip, make_subtrip
from trip_planner_app.models.itinerary import ItineraryItem
from trip_planner_app.models.trip import Trip, Subtrip


def test_trip_duration_is_inclusive():
    assert make_trip(start="2025-06-01", end="2025-06-10").duration_days == 10
    assert make_trip(start="2025-06-01", end="2025-06-01").duration_days == 1


def test_duration_is_zero_for_inverted_or_malformed_ranges():
    assert make_trip(start="2025-06-10", end="2025-06-01").duration_days == 0
    assert make_subtrip(start="soon", end="2025-06-01").duration_days == 0


def test_trip_from_dict_normalizes_empty_optionals():
    trip = Trip.from_dict({
        "id": "t1",
        "user_id": "u1",
        "title": "Summer",
        "destination": "Lisbon",
        "start_date": "2025-07-01",
        "end_date": "2025-07-04",
        "color": "",
        "emoji": None,
    })
    assert trip.color is None
    assert trip.emoji is None
    assert Trip.from_dict(trip.to_dict()) == trip


def test_subtrip_from_dict_defaults_order_index():
    subtrip = Subtrip.from_dict({
        "id": "s1",
        "trip_id": "t1",
        "location": "Porto",
        "start_date": "2025-07-02",
        "end_date": "2025-07-03",
        "order_index": None,
    })
    assert subtrip.order_index == 0


def test_itinerary_item_from_dict():
    item = ItineraryItem.from_dict({
        "id": "i1",
        "trip_id": "t1",
        "type": "museum",
        "title": "Louvre",
        "start_time": "2025-06-03T10:00:00",
        "cost": 22,
        "currency": "EUR",
    })
    assert item.cost == 22.0
    assert item.day_key == "2025-06-03"
    assert item.type_label.endswith("Museum")


def test_itinerary_item_rejects_unknown_type():
    with pytest.raises(ValueError):
        ItineraryItem.from_dict({"id": "i1", "type": "teleport", "title": "x", "start_time": "2025-06-03"})
