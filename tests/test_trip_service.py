import pytest

from trip_planner_app.services.trip_service import TripService


@pytest.fixture
def trip_service(db_service):
    # Bypass the session singleton, which needs a running Streamlit app
    return TripService.__wrapped__(db_service)


@pytest.fixture
def trip(trip_service):
    return trip_service.create_trip("u1", {
        "title": "Italy",
        "destination": "Rome",
        "start_date": "2025-06-01",
        "end_date": "2025-06-10",
    })


def test_create_trip_returns_model(trip):
    assert trip.destination == "Rome"
    assert trip.user_id == "u1"
    assert trip.duration_days == 10
    assert trip.color is None


@pytest.mark.parametrize("values, message", [
    ({"title": "", "destination": "Rome", "start_date": "2025-06-01", "end_date": "2025-06-02"}, "title"),
    ({"title": "X", "destination": " ", "start_date": "2025-06-01", "end_date": "2025-06-02"}, "destination"),
    ({"title": "X", "destination": "Rome", "start_date": "2025-06-05", "end_date": "2025-06-02"}, "End date"),
    ({"title": "X", "destination": "Rome", "start_date": "tomorrow", "end_date": "2025-06-02"}, "Invalid"),
])
def test_create_trip_validates_input(trip_service, values, message):
    with pytest.raises(ValueError, match=message):
        trip_service.create_trip("u1", values)


def test_update_trip_revalidates_dates(trip_service, trip):
    with pytest.raises(ValueError):
        trip_service.update_trip(trip.id, {"end_date": "2025-05-01"})

    updated = trip_service.update_trip(trip.id, {"end_date": "2025-06-12", "color": "#123456"})
    assert updated.end_date == "2025-06-12"
    assert updated.color == "#123456"


def test_create_subtrip_assigns_order_index(trip_service, trip):
    first = trip_service.create_subtrip(trip.id, {
        "location": "Florence", "start_date": "2025-06-02", "end_date": "2025-06-03"})
    second = trip_service.create_subtrip(trip.id, {
        "location": "Venice", "start_date": "2025-06-05", "end_date": "2025-06-06"})

    assert (first.order_index, second.order_index) == (0, 1)
    assert [s.location for s in trip_service.list_subtrips(trip.id)] == ["Florence", "Venice"]


def test_create_subtrip_outside_trip_range_is_allowed_but_logged(trip_service, trip, caplog):
    subtrip = trip_service.create_subtrip(trip.id, {
        "location": "Milan", "start_date": "2025-06-09", "end_date": "2025-06-14"})
    assert subtrip.end_date == "2025-06-14"
    assert "outside trip" in caplog.text


def test_create_item_validates_type(trip_service, trip):
    with pytest.raises(ValueError, match="Unknown itinerary item type"):
        trip_service.create_item(trip.id, {"type": "teleport", "title": "Beam", "start_time": "2025-06-02T10:00:00"})


def test_move_item_to_day_persists(trip_service, trip):
    item = trip_service.create_item(trip.id, {
        "type": "museum", "title": "Vatican", "start_time": "2025-06-02T09:00:00"})

    moved = trip_service.move_item_to_day(item, "2025-06-04")
    assert moved.start_time == "2025-06-04T12:00:00"
    assert [i.start_time for i in trip_service.list_items(trip.id)] == ["2025-06-04T12:00:00"]

    assert trip_service.move_item_to_day(moved, "2025-06-04") is moved


def test_load_bundle(trip_service, trip):
    trip_service.create_subtrip(trip.id, {
        "location": "Florence", "start_date": "2025-06-02", "end_date": "2025-06-03"})
    trip_service.create_item(trip.id, {
        "type": "meal", "title": "Gelato", "start_time": "2025-06-02T15:00:00", "cost": 4, "currency": "EUR"})

    bundle = trip_service.load_bundle(trip.id)
    assert bundle.trip == trip
    assert [s.location for s in bundle.subtrips] == ["Florence"]
    assert [i.title for i in bundle.items] == ["Gelato"]
    assert bundle.items[0].cost == 4.0

    assert trip_service.load_bundle("missing") is None


def test_delete_trip_removes_bundle(trip_service, trip):
    assert trip_service.delete_trip(trip.id) is True
    assert trip_service.list_trips("u1") == []
    assert trip_service.load_bundle(trip.id) is None


def test_update_subtrip_revalidates_dates(trip_service, trip):
    subtrip = trip_service.create_subtrip(trip.id, {
        "location": "Florence", "start_date": "2025-06-02", "end_date": "2025-06-03"})

    with pytest.raises(ValueError):
        trip_service.update_subtrip(subtrip.id, {"start_date": "2025-06-09"})

    updated = trip_service.update_subtrip(subtrip.id, {"end_date": "2025-06-04", "color": "#AA00AA"})
    assert updated.end_date == "2025-06-04"
    assert updated.color == "#AA00AA"


def test_move_item_to_day_persists_end_time(trip_service, trip):
    item = trip_service.create_item(trip.id, {
        "type": "activity", "title": "Colosseum", "start_time": "2025-06-02T09:00:00",
        "end_time": "2025-06-02T11:00:00"})

    moved = trip_service.move_item_to_day(item, "2025-06-05")
    stored = trip_service.list_items(trip.id)[0]

    assert moved.end_time == "2025-06-05T14:00:00"
    assert (stored.start_time, stored.end_time) == ("2025-06-05T12:00:00", "2025-06-05T14:00:00")
