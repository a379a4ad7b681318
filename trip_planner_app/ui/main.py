import logging

import streamlit as st

from trip_planner_app.config import VIEW_OPTIONS
from trip_planner_app.services.calendar_service import get_calendar_service
from trip_planner_app.services.geocoding_service import GeocodingService
from trip_planner_app.services.trip_service import get_trip_service
from trip_planner_app.ui import components, state

logger = logging.getLogger(__name__)


def main():
    logger.info("Starting Trip Planner application")
    st.title("Trip Planner")
    st.write("Plan your trips, their locations and every day in between.")

    try:
        logger.debug("Getting service instances")
        trip_service = get_trip_service()

        setup = trip_service.db_service.check_setup()
        if not setup["success"]:
            logger.error(f"Database setup check failed: {setup}")
            st.error(setup["message"])
            return

        logger.debug("Initializing session state")
        state.initialize_session_state()
        user_id = st.session_state.user_id

        trips = trip_service.list_trips(user_id)

        # Sidebar navigation
        with st.sidebar:
            st.header("Your Trips")
            trip_ids = [trip.id for trip in trips]
            titles = {trip.id: f"{trip.emoji or ''} {trip.title}".strip() for trip in trips}
            if trip_ids:
                current = st.session_state.selected_trip_id
                selected = st.selectbox(
                    "Trip",
                    options=trip_ids,
                    index=trip_ids.index(current) if current in trip_ids else 0,
                    format_func=lambda trip_id: titles[trip_id]
                )
                state.select_trip(selected)
            else:
                state.select_trip(None)

            view = st.radio("View", VIEW_OPTIONS, index=VIEW_OPTIONS.index(st.session_state.active_view))
            state.set_active_view(view)

        if st.session_state.active_view == "Trips" or st.session_state.selected_trip_id is None:
            st.subheader("Trips")

            def on_add_trip(values):
                """Callback for when a new trip is submitted."""
                try:
                    trip = trip_service.create_trip(user_id, values)
                except ValueError as e:
                    st.error(str(e))
                    return
                state.select_trip(trip.id)
                st.rerun()

            def on_delete_trip(trip_id):
                trip_service.delete_trip(trip_id)
                state.select_trip(None)
                st.rerun()

            def on_select_trip(trip_id):
                state.select_trip(trip_id)
                state.set_active_view("Calendar")
                st.rerun()

            components.render_trip_form(on_add_trip)

            if not trips:
                logger.debug("No trips found for user")
                st.info("No trips planned yet. Use the form above to add a trip!")
            for trip in trips:
                components.render_trip_details(trip, on_select_trip, on_delete_trip)
            return

        bundle = trip_service.load_bundle(st.session_state.selected_trip_id)
        if bundle is None:
            state.select_trip(None)
            st.rerun()
            return

        st.subheader(f"{bundle.trip.emoji or ''} {bundle.trip.title}".strip())
        st.caption(f"{bundle.trip.destination} · {bundle.trip.start_date} → {bundle.trip.end_date}")

        def on_add_subtrip(values):
            try:
                trip_service.create_subtrip(bundle.trip.id, values)
            except ValueError as e:
                st.error(str(e))
                return
            st.rerun()

        def on_add_item(values):
            try:
                trip_service.create_item(bundle.trip.id, values)
            except ValueError as e:
                st.error(str(e))
                return
            st.rerun()

        def on_move_item(item, day):
            trip_service.move_item_to_day(item, day)
            st.rerun()

        def on_delete_item(item_id):
            trip_service.delete_item(item_id)
            st.rerun()

        col1, col2 = st.columns(2)
        with col1:
            components.render_subtrip_form(bundle.trip, on_add_subtrip)
        with col2:
            components.render_item_form(bundle, on_add_item)

        service = get_calendar_service([bundle.trip], bundle.subtrips)

        if st.session_state.active_view == "Calendar":
            components.render_calendar_tab(bundle, service)
        elif st.session_state.active_view == "Itinerary":
            components.render_itinerary_tab(bundle, service, on_move_item, on_delete_item)
        elif st.session_state.active_view == "Map":
            components.render_map_tab(bundle, service, GeocodingService(trip_service.db_service))

    except Exception as e:
        logger.critical(
            f"Critical error in main application: {str(e)}", exc_info=True)
        st.error("An unexpected error occurred. Please try refreshing the page.")
