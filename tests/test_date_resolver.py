from datetime import date, datetime

import pytest

from factories import make_trip, make_subtrip
from trip_planner_app.models.calendar import ValidationError
from trip_planner_app.services.date_resolver import (
    DateLocationResolver,
    build_day_location_map,
    iter_calendar_dates,
    parse_calendar_date,
)


def test_parse_calendar_date_accepts_dates_datetimes_and_timestamps():
    assert parse_calendar_date("2025-06-01") == date(2025, 6, 1)
    assert parse_calendar_date("2025-06-01T23:30:00+02:00") == date(2025, 6, 1)
    assert parse_calendar_date(date(2025, 6, 1)) == date(2025, 6, 1)
    assert parse_calendar_date(datetime(2025, 6, 1, 18, 0)) == date(2025, 6, 1)


@pytest.mark.parametrize("value", [
    "", "not-a-date", "2025-13-01", "2025-02-30", None, 20250601,
    "2025-06-01garbage", "2025-06-10#oops", "2025-06-01T25:00:00",
])
def test_parse_calendar_date_rejects_malformed_values(value):
    with pytest.raises(ValidationError) as excinfo:
        parse_calendar_date(value, entity_id="x1")
    assert excinfo.value.entity_id == "x1"
    assert excinfo.value.value == value


def test_parse_calendar_date_accepts_utc_suffix():
    assert parse_calendar_date("2025-06-01T23:30:00Z") == date(2025, 6, 1)
    assert parse_calendar_date(" 2025-06-01 ") == date(2025, 6, 1)


def test_trailing_junk_after_date_excludes_entity():
    trip = make_trip(end="2025-06-10#oops")
    resolver = DateLocationResolver([trip], [])

    assert [entry.entity_id for entry in resolver.skipped] == ["t1"]
    assert resolver.resolve("2025-06-05") is None


def test_iter_calendar_dates_is_inclusive_and_empty_when_inverted():
    days = list(iter_calendar_dates(date(2025, 6, 29), date(2025, 7, 2)))
    assert days == [date(2025, 6, 29), date(2025, 6, 30), date(2025, 7, 1), date(2025, 7, 2)]
    assert list(iter_calendar_dates(date(2025, 6, 10), date(2025, 6, 5))) == []


def test_trip_covers_its_whole_range():
    trip = make_trip()
    resolver = DateLocationResolver([trip], [])

    assert len(resolver) == 10
    for key in resolver.covered_dates():
        record = resolver.resolve(key)
        assert record.location == "Paris"
        assert record.is_trip is True
        assert record.owner_id == "t1"


def test_subtrip_overrides_trip_on_shared_dates():
    trip = make_trip()
    subtrip = make_subtrip()
    resolver = DateLocationResolver([trip], [subtrip])

    assert resolver.resolve("2025-06-02").owner_id == "t1"
    for day in ("2025-06-03", "2025-06-04"):
        record = resolver.resolve(day)
        assert record.owner_id == "s1"
        assert record.is_trip is False
        assert record.location == "Versailles"
    assert resolver.resolve("2025-06-05").owner_id == "t1"


def test_subtrip_wins_even_when_listed_trip_comes_after_it():
    # Trips are always applied first, whatever the caller's ordering
    day_map, _ = build_day_location_map(
        [make_trip("t2", "Lyon", "2025-06-01", "2025-06-05")],
        [make_subtrip("s9", "Annecy", "2025-06-02", "2025-06-02", trip_id="t2")],
    )
    assert day_map["2025-06-02"].owner_id == "s9"


def test_overlapping_subtrips_last_in_list_wins():
    rome = make_subtrip("s1", "Rome", "2025-06-01", "2025-06-05")
    naples = make_subtrip("s2", "Naples", "2025-06-04", "2025-06-06")

    resolver = DateLocationResolver([], [rome, naples])
    assert resolver.resolve("2025-06-03").location == "Rome"
    assert resolver.resolve("2025-06-04").location == "Naples"
    assert resolver.resolve("2025-06-05").location == "Naples"
    assert resolver.resolve("2025-06-06").location == "Naples"

    reversed_order = DateLocationResolver([], [naples, rome])
    assert reversed_order.resolve("2025-06-04").location == "Rome"
    assert reversed_order.resolve("2025-06-06").location == "Naples"


def test_inverted_range_contributes_nothing_and_is_not_reported():
    inverted = make_subtrip("s1", "Nowhere", "2025-06-10", "2025-06-05")
    resolver = DateLocationResolver([], [inverted])

    assert len(resolver) == 0
    assert resolver.skipped == []
    assert resolver.resolve("2025-06-07") is None


def test_uncovered_date_resolves_to_none():
    resolver = DateLocationResolver([make_trip()], [])
    assert resolver.resolve("2025-05-31") is None
    assert resolver.resolve(date(2025, 6, 11)) is None


def test_malformed_entity_is_skipped_and_others_still_resolve(caplog):
    good = make_trip()
    bad_trip = make_trip("t-bad", "Oslo", "garbage", "2025-06-10")
    bad_subtrip = make_subtrip("s-bad", "Bergen", "2025-06-03", "")

    with caplog.at_level("WARNING"):
        resolver = DateLocationResolver([good, bad_trip], [bad_subtrip])

    assert resolver.resolve("2025-06-03").owner_id == "t1"
    assert [(s.entity_id, s.is_trip) for s in resolver.skipped] == [("t-bad", True), ("s-bad", False)]
    assert "t-bad" in caplog.text
    assert "s-bad" in caplog.text


def test_resolver_does_not_mutate_inputs():
    trips = [make_trip()]
    subtrips = [make_subtrip()]
    before = ([t.to_dict() for t in trips], [s.to_dict() for s in subtrips])

    resolver = DateLocationResolver(trips, subtrips)
    trips.append(make_trip("t2", "Berlin", "2025-07-01", "2025-07-02"))

    assert ([trips[0].to_dict()], [subtrips[0].to_dict()]) == before
    assert resolver.resolve("2025-07-01") is None


def test_resolve_rejects_malformed_query():
    resolver = DateLocationResolver([make_trip()], [])
    with pytest.raises(ValidationError):
        resolver.resolve("June 3rd")


def test_same_input_builds_identical_map():
    trips = [make_trip()]
    subtrips = [make_subtrip(), make_subtrip("s2", "Giverny", "2025-06-04", "2025-06-06")]
    assert build_day_location_map(trips, subtrips) == build_day_location_map(trips, subtrips)
