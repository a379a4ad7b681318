from datetime import date

import pytest

from factories import make_item
from trip_planner_app.models.calendar import ValidationError
from trip_planner_app.services.itinerary_service import (
    day_status,
    group_items_by_day,
    most_recent_item,
    reassign_item_day,
    total_cost_by_currency,
)


def test_group_items_by_day_sorts_within_each_day():
    items = [
        make_item("late", "2025-06-02T18:00:00"),
        make_item("next", "2025-06-03T08:00:00"),
        make_item("early", "2025-06-02T07:30:00"),
    ]
    grouped = group_items_by_day(items)

    assert list(grouped) == ["2025-06-02", "2025-06-03"]
    assert [item.id for item in grouped["2025-06-02"]] == ["early", "late"]


def test_group_items_by_day_skips_bad_start_times(caplog):
    grouped = group_items_by_day([make_item("bad", "whenever"), make_item("ok")])
    assert [item.id for items in grouped.values() for item in items] == ["ok"]
    assert "bad" in caplog.text


def test_reassign_item_day_moves_to_noon_without_mutating():
    item = make_item(start_time="2025-06-02T09:00:00")
    moved = reassign_item_day(item, "2025-06-05")

    assert moved.start_time == "2025-06-05T12:00:00"
    assert moved.day_key == "2025-06-05"
    assert item.start_time == "2025-06-02T09:00:00"
    assert moved.id == item.id


@pytest.mark.parametrize("end_time, expected", [
    ("2025-06-02T11:00:00", "2025-06-05T14:00:00"),
    ("2025-06-03T10:30:00", "2025-06-06T13:30:00"),
    (None, None),
])
def test_reassign_item_day_keeps_duration(end_time, expected):
    item = make_item(start_time="2025-06-02T09:00:00", end_time=end_time)
    moved = reassign_item_day(item, "2025-06-05")

    assert moved.end_time == expected
    assert item.end_time == end_time


def test_reassign_item_day_leaves_unreadable_end_time(caplog):
    item = make_item(end_time="after lunch")
    moved = reassign_item_day(item, "2025-06-05")

    assert moved.start_time == "2025-06-05T12:00:00"
    assert moved.end_time == "after lunch"
    assert "i1" in caplog.text


def test_reassign_item_day_same_day_is_a_no_op():
    item = make_item(start_time="2025-06-02T09:00:00")
    assert reassign_item_day(item, date(2025, 6, 2)) is item


def test_reassign_item_day_rejects_bad_target():
    with pytest.raises(ValidationError):
        reassign_item_day(make_item(), "day-2025-06-05")


def test_most_recent_item():
    items = [
        make_item("old", created_at="2025-01-01T00:00:00"),
        make_item("new", created_at="2025-03-01T00:00:00"),
        make_item("mid", created_at="2025-02-01T00:00:00"),
    ]
    assert most_recent_item(items).id == "new"
    assert most_recent_item([]) is None


def test_day_status():
    today = date(2025, 6, 5)
    assert day_status(date(2025, 6, 4), today) == "past"
    assert day_status(date(2025, 6, 5), today) == "today"
    assert day_status(date(2025, 6, 6), today) == "future"


def test_total_cost_by_currency():
    items = [
        make_item("a", cost=10.0, currency="EUR"),
        make_item("b", cost=5.5, currency="EUR"),
        make_item("c", cost=20.0, currency="JPY"),
        make_item("d"),
    ]
    assert total_cost_by_currency(items) == {"EUR": 15.5, "JPY": 20.0}
