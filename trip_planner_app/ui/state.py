"""
Streamlit session state management.
"""
from typing import Optional
import streamlit as st

from trip_planner_app.config import DEFAULT_USER_ID, VIEW_OPTIONS


def initialize_session_state():
    """Initialize or get session state variables."""
    if 'user_id' not in st.session_state:
        st.session_state.user_id = DEFAULT_USER_ID

    if 'selected_trip_id' not in st.session_state:
        st.session_state.selected_trip_id = None

    if 'active_view' not in st.session_state:
        st.session_state.active_view = VIEW_OPTIONS[0]

    # Month shown by the calendar, as (year, month)
    if 'calendar_month' not in st.session_state:
        st.session_state.calendar_month = None


def select_trip(trip_id: Optional[str]):
    """Select the trip shown by the calendar, itinerary and map views."""
    if trip_id != st.session_state.selected_trip_id:
        st.session_state.calendar_month = None
    st.session_state.selected_trip_id = trip_id


def set_active_view(view: str):
    """Set the current view in the navigation."""
    st.session_state.active_view = view


def set_calendar_month(year: int, month: int):
    st.session_state.calendar_month = (year, month)


def shift_calendar_month(delta: int):
    """Move the calendar forward or back by a number of months."""
    year, month = st.session_state.calendar_month
    index = year * 12 + (month - 1) + delta
    st.session_state.calendar_month = (index // 12, index % 12 + 1)
