"""
Application configuration and constants.

This module contains all the configuration values and constants used throughout
the application. Calendar colors, itinerary types and storage locations all live
here so the services and the UI agree on them.
"""
from typing import Dict, List
from datetime import date

# File paths
DB_FILE_PATH = "data/trip_planner.db"

# Local user standing in for an authenticated account
DEFAULT_USER_ID = "local-user"

# Calendar dates are stored and compared as YYYY-MM-DD strings
DATE_FORMAT = "%Y-%m-%d"

# Fallback color for trips without an explicit color (neutral dark gray)
TRIP_FALLBACK_COLOR = "#374151"

# Ordered palette for subtrips without an explicit color
PALETTE: List[str] = [
    "#EF4444",  # red
    "#F97316",  # orange
    "#F59E0B",  # amber
    "#EAB308",  # yellow
    "#84CC16",  # lime
    "#22C55E",  # green
    "#10B981",  # emerald
    "#14B8A6",  # teal
    "#06B6D4",  # cyan
    "#0EA5E9",  # sky
    "#3B82F6",  # blue
    "#6366F1",  # indigo
    "#8B5CF6",  # violet
    "#A855F7",  # purple
    "#D946EF",  # fuchsia
    "#EC4899",  # pink
]

# Itinerary item types with their display labels and icons
ITINERARY_ITEM_TYPES: Dict[str, str] = {
    "flight": "✈️ Flight",
    "transport": "🚆 Transport",
    "accommodation": "🛏️ Accommodation",
    "meal": "🍽️ Meal",
    "activity": "📍 Activity",
    "landmark": "📷 Landmark",
    "event": "📅 Event",
    "local_transport": "🚗 Local transport",
    "shopping": "🛍️ Shopping",
    "outdoor": "🌲 Outdoor",
    "museum": "🏛️ Museum",
    "wellness": "❤️ Wellness",
    "social": "👥 Social",
    "free_time": "🕒 Free time",
    "checkin": "✅ Check-in",
}

# Default trip dates for the creation form
DEFAULT_TRIP_START_DATE = date(2025, 6, 1)
DEFAULT_TRIP_END_DATE = date(2025, 6, 10)

# Items dropped on a day are moved to this time of day
DROP_TIME_OF_DAY = "12:00:00"

# Number of resolved calendars kept in memory
CALENDAR_CACHE_SIZE = 32

# Geocoding
GEOCODE_URL = "https://api.openrouteservice.org/geocode/search"
GEOCODE_TIMEOUT = 10  # seconds

# API retry configuration
MAX_API_RETRIES = 3
INITIAL_RETRY_DELAY = 2  # seconds
RETRY_JITTER_FACTOR = 0.1  # Add randomness to avoid thundering herd

# UI configuration
CALENDAR_WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
VIEW_OPTIONS = ["Trips", "Calendar", "Itinerary", "Map"]
