"""
Main Streamlit application for the Trip Planner.
"""
import logging
from trip_planner_app.ui.main import main

# Add a handler
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler()]
)

logging.getLogger("trip_planner_app").setLevel(logging.DEBUG)

if __name__ == "__main__":
    main()
