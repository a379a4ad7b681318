from trip_planner_app.models.itinerary import ItineraryItem
from trip_planner_app.models.trip import Trip, Subtrip


def make_trip(trip_id="t1", destination="Paris", start="2025-06-01", end="2025-06-10", color=None):
    return Trip(
        id=trip_id,
        user_id="u1",
        title=f"Trip to {destination}",
        destination=destination,
        start_date=start,
        end_date=end,
        color=color,
    )


def make_subtrip(subtrip_id="s1", location="Versailles", start="2025-06-03", end="2025-06-04",
                 color=None, trip_id="t1"):
    return Subtrip(
        id=subtrip_id,
        trip_id=trip_id,
        location=location,
        start_date=start,
        end_date=end,
        color=color,
    )


def make_item(item_id="i1", start_time="2025-06-02T09:00:00", item_type="activity",
              created_at="2025-05-01T10:00:00", cost=None, currency=None, end_time=None):
    return ItineraryItem(
        id=item_id,
        trip_id="t1",
        type=item_type,
        title=f"Item {item_id}",
        start_time=start_time,
        end_time=end_time,
        created_at=created_at,
        cost=cost,
        currency=currency,
    )
