"""
Reusable UI components for the Streamlit application.
"""
import calendar
import html
from datetime import date, datetime, time
from typing import Dict, List

import pandas as pd
import streamlit as st

from trip_planner_app.config import (
    DEFAULT_TRIP_START_DATE,
    DEFAULT_TRIP_END_DATE,
    ITINERARY_ITEM_TYPES,
    CALENDAR_WEEKDAY_LABELS,
    TRIP_FALLBACK_COLOR,
)
from trip_planner_app.models.itinerary import ItineraryItem
from trip_planner_app.models.trip import Trip, TripBundle
from trip_planner_app.services.calendar_service import CalendarService
from trip_planner_app.services.date_resolver import format_calendar_date, parse_calendar_date
from trip_planner_app.services.itinerary_service import (
    day_status,
    group_items_by_day,
    most_recent_item,
    total_cost_by_currency,
)
from trip_planner_app.ui import state

DAY_STATUS_BACKGROUND = {
    "past": "#F3F4F6",
    "today": "#DBEAFE",
    "future": "#FFFFFF",
}


def render_trip_form(on_add_trip):
    """Render the form for adding a new trip."""
    with st.expander("Add a New Trip", expanded=False):
        with st.form("trip_form", clear_on_submit=True):
            title = st.text_input("Title")
            destination = st.text_input("Destination (City, Country)")
            col1, col2 = st.columns(2)
            with col1:
                start_date = st.date_input("Start Date", value=DEFAULT_TRIP_START_DATE)
            with col2:
                end_date = st.date_input("End Date", value=DEFAULT_TRIP_END_DATE)
            col3, col4 = st.columns(2)
            with col3:
                use_color = st.checkbox("Custom color")
                color = st.color_picker("Color", value=TRIP_FALLBACK_COLOR)
            with col4:
                emoji = st.text_input("Emoji", max_chars=4)
            description = st.text_area("Description")

            if st.form_submit_button("Add Trip"):
                if start_date > end_date:
                    st.error("End date must be after start date.")
                else:
                    on_add_trip({
                        "title": title,
                        "destination": destination,
                        "start_date": start_date.isoformat(),
                        "end_date": end_date.isoformat(),
                        "color": color if use_color else None,
                        "emoji": emoji or None,
                        "description": description or None,
                    })


def render_trip_details(trip: Trip, on_select, on_delete):
    """Render a card for a single trip."""
    with st.container():
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            st.write(f"**{trip.emoji or ''} {trip.title}**")
            st.write(f"📍 {trip.destination}")
        with col2:
            st.write(f"{trip.start_date} → {trip.end_date}")
            st.write(f"**Duration: {trip.duration_days} days**")
        with col3:
            if st.button("Open", key=f"open_trip_{trip.id}"):
                on_select(trip.id)
            if st.button("Delete", key=f"delete_trip_{trip.id}",
                         help="Also deletes all locations and itinerary items"):
                on_delete(trip.id)
        st.divider()


def render_subtrip_form(trip: Trip, on_add_subtrip):
    """Render the form for adding a location to a trip."""
    with st.expander("Add a Location", expanded=False):
        with st.form(f"subtrip_form_{trip.id}", clear_on_submit=True):
            location = st.text_input("Location", key=f"subtrip_location_{trip.id}")
            col1, col2 = st.columns(2)
            with col1:
                start_date = st.date_input("Start Date", value=parse_calendar_date(trip.start_date),
                                           key=f"subtrip_start_{trip.id}")
            with col2:
                end_date = st.date_input("End Date", value=parse_calendar_date(trip.end_date),
                                         key=f"subtrip_end_{trip.id}")
            use_color = st.checkbox("Custom color", key=f"subtrip_use_color_{trip.id}")
            color = st.color_picker("Color", value="#10B981", key=f"subtrip_color_{trip.id}")
            description = st.text_area("Description", key=f"subtrip_description_{trip.id}")

            if st.form_submit_button("Add Location"):
                on_add_subtrip({
                    "location": location,
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "color": color if use_color else None,
                    "description": description or None,
                })


def render_item_form(bundle: TripBundle, on_add_item):
    """Render the form for adding an itinerary item."""
    trip = bundle.trip
    with st.expander("Add an Itinerary Item", expanded=False):
        with st.form(f"item_form_{trip.id}", clear_on_submit=True):
            item_type = st.selectbox(
                "Type",
                options=list(ITINERARY_ITEM_TYPES),
                format_func=lambda key: ITINERARY_ITEM_TYPES[key]
            )
            title = st.text_input("Title", key=f"item_title_{trip.id}")
            location = st.text_input("Location", key=f"item_location_{trip.id}")
            col1, col2 = st.columns(2)
            with col1:
                day = st.date_input("Day", value=parse_calendar_date(trip.start_date), key=f"item_day_{trip.id}")
            with col2:
                start = st.time_input("Time", value=time(9, 0))
            subtrip_names = {subtrip.id: subtrip.location for subtrip in bundle.subtrips}
            subtrip_id = st.selectbox(
                "Location group",
                options=[None] + list(subtrip_names),
                format_func=lambda key: "None" if key is None else subtrip_names[key]
            )
            col3, col4 = st.columns(2)
            with col3:
                cost = st.number_input("Cost", min_value=0.0, value=0.0, step=1.0)
            with col4:
                currency = st.text_input("Currency", value="EUR", max_chars=3)
            notes = st.text_area("Notes", key=f"item_notes_{trip.id}")

            if st.form_submit_button("Add Item"):
                on_add_item({
                    "type": item_type,
                    "title": title,
                    "location": location or None,
                    "start_time": datetime.combine(day, start).isoformat(),
                    "subtrip_id": subtrip_id,
                    "cost": cost or None,
                    "currency": currency.upper() if cost else None,
                    "notes": notes or None,
                })


def _day_cell_html(day: date, service: CalendarService, items: List[ItineraryItem], in_month: bool) -> str:
    resolved = service.resolve_day_location(day)
    opacity = "1" if in_month else "0.35"
    style = f"opacity:{opacity};border-radius:6px;padding:4px;min-height:72px;"
    if resolved:
        style += f"background:{resolved.color};color:#FFFFFF;"
        badge = f"<div style='font-size:0.7em'>{html.escape(resolved.location)}</div>"
    else:
        style += "background:#F9FAFB;color:#111827;"
        badge = ""
    count = f"<div style='font-size:0.7em'>• {len(items)} items</div>" if items else ""
    return (f"<td style='{style}vertical-align:top'>"
            f"<strong>{day.day}</strong>{badge}{count}</td>")


def render_month_calendar(service: CalendarService, items: List[ItineraryItem], year: int, month: int):
    """Render a month grid with each day painted in the color of the location owning it."""
    items_by_day = group_items_by_day(items)
    weeks = calendar.Calendar(firstweekday=0).monthdatescalendar(year, month)

    header = "".join(f"<th>{label}</th>" for label in CALENDAR_WEEKDAY_LABELS)
    rows = []
    for week in weeks:
        cells = "".join(
            _day_cell_html(day, service, items_by_day.get(format_calendar_date(day), []), day.month == month)
            for day in week
        )
        rows.append(f"<tr>{cells}</tr>")

    st.markdown(
        f"<table style='width:100%;table-layout:fixed;border-spacing:4px'>"
        f"<thead><tr>{header}</tr></thead><tbody>{''.join(rows)}</tbody></table>",
        unsafe_allow_html=True
    )


def render_legend(service: CalendarService):
    """Render one colored swatch per trip destination and location."""
    entries = service.legend_entries()
    if not entries:
        return
    swatches = []
    for entry in entries:
        kind = "trip" if entry.is_trip else "location"
        swatches.append(
            f"<span style='display:inline-block;margin:2px 8px 2px 0'>"
            f"<span style='display:inline-block;width:12px;height:12px;border-radius:3px;"
            f"background:{entry.color};margin-right:4px'></span>"
            f"{html.escape(entry.location)} <small>({kind})</small></span>"
        )
    st.markdown("".join(swatches), unsafe_allow_html=True)


def render_calendar_tab(bundle: TripBundle, service: CalendarService):
    """Render the calendar view for a trip."""
    if service.skipped:
        skipped_ids = ", ".join(entry.entity_id for entry in service.skipped)
        st.warning(f"Some entries have invalid dates and are not shown: {skipped_ids}")

    days = service.visible_days()
    if not days:
        st.info("This trip has no valid dates to show.")
        return

    if st.session_state.calendar_month is None:
        state.set_calendar_month(days[0].year, days[0].month)
    year, month = st.session_state.calendar_month

    col1, col2, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("◀ Previous"):
            state.shift_calendar_month(-1)
            st.rerun()
    with col2:
        st.markdown(f"### {calendar.month_name[month]} {year}")
    with col3:
        if st.button("Next ▶"):
            state.shift_calendar_month(1)
            st.rerun()

    render_month_calendar(service, bundle.items, year, month)
    render_legend(service)


def render_itinerary_tab(bundle: TripBundle, service: CalendarService, on_move_item, on_delete_item):
    """Render the day-by-day itinerary with controls to move items between days."""
    days = service.visible_days()
    if not days:
        st.info("This trip has no valid dates to show.")
        return

    items_by_day = group_items_by_day(bundle.items)
    recent = most_recent_item(bundle.items)
    day_options = [format_calendar_date(day) for day in days]

    for day in days:
        key = format_calendar_date(day)
        resolved = service.resolve_day_location(day)
        background = DAY_STATUS_BACKGROUND[day_status(day)]
        accent = resolved.color if resolved else "#D1D5DB"
        label = html.escape(resolved.location) if resolved else ""
        st.markdown(
            f"<div style='background:{background};border-left:6px solid {accent};"
            f"padding:6px 10px;border-radius:6px;margin-top:8px'>"
            f"<strong>{day.strftime('%A')}</strong> {day.strftime('%d %B %Y')} "
            f"<span style='color:{accent}'>{label}</span></div>",
            unsafe_allow_html=True
        )

        for item in items_by_day.get(key, []):
            col1, col2, col3 = st.columns([4, 2, 1])
            with col1:
                marker = " 🆕" if recent is not None and item.id == recent.id else ""
                st.write(f"{item.type_label}: **{item.title}**{marker}")
                if item.location:
                    st.caption(item.location)
            with col2:
                target = st.selectbox(
                    "Move to",
                    options=day_options,
                    index=day_options.index(key) if key in day_options else 0,
                    key=f"move_{item.id}",
                    label_visibility="collapsed"
                )
                if target != key:
                    on_move_item(item, target)
            with col3:
                if st.button("🗑️", key=f"delete_item_{item.id}"):
                    on_delete_item(item.id)

    totals = total_cost_by_currency(bundle.items)
    if totals:
        st.subheader("Costs")
        st.dataframe(
            pd.DataFrame([{"Currency": currency, "Total": total} for currency, total in totals.items()]),
            use_container_width=True
        )


def render_map_tab(bundle: TripBundle, service: CalendarService, geocoding_service):
    """Render trip destination and locations on a map."""
    locations: List[Dict] = []
    for entry in service.legend_entries():
        locations.append({"name": entry.location, "color": entry.color})

    with st.spinner("Locating places..."):
        points = geocoding_service.map_points(locations)

    if not points:
        st.info("No locations could be placed on the map.")
        return

    df = pd.DataFrame(points)
    st.map(df, latitude="latitude", longitude="longitude", color="color")
    st.dataframe(df[["name", "latitude", "longitude"]], use_container_width=True)
