"""
Geocoding service for the Trip Planner application.
Resolves location names to coordinates for the map view, caching results in the database.
"""
import logging
import time
import random
from typing import List, Optional, Dict, Any, Iterable

import requests
import streamlit as st
from streamlit.errors import StreamlitSecretNotFoundError

from trip_planner_app.config import (
    GEOCODE_URL,
    GEOCODE_TIMEOUT,
    MAX_API_RETRIES,
    INITIAL_RETRY_DELAY,
    RETRY_JITTER_FACTOR,
)
from trip_planner_app.services.database_service import DatabaseService

logger = logging.getLogger(__name__)


def get_api_key():
    """
    Read the OpenRouteService key from Streamlit secrets.

    Returns:
        The key, or None when no secrets file is present or the key is not set
    """
    try:
        return st.secrets.get("OPENROUTE_API_KEY")
    except (FileNotFoundError, StreamlitSecretNotFoundError) as e:
        logger.warning(f"No Streamlit secrets available, map geocoding is disabled: {e}")
        return None


def retry_with_backoff(max_retries=MAX_API_RETRIES, initial_delay=INITIAL_RETRY_DELAY,
                       jitter_factor=RETRY_JITTER_FACTOR):
    """
    Decorator to retry a function with exponential backoff on request errors.

    Args:
        max_retries: Maximum number of attempts
        initial_delay: Initial delay in seconds
        jitter_factor: Factor to add randomness to delay

    Returns:
        Decorator function
    """
    def decorator(func):
        def wrapper(*args, **kwargs):
            retries = 0
            delay = initial_delay

            while True:
                try:
                    return func(*args, **kwargs)
                except requests.exceptions.RequestException:
                    retries += 1
                    if retries >= max_retries:
                        logger.error(f"Max retries reached for {func.__name__}. Giving up.")
                        raise

                    # Calculate backoff with jitter
                    jitter = delay * jitter_factor * random.uniform(-1, 1)
                    wait_time = delay + jitter

                    logger.warning(f"Error in {func.__name__}, retrying in {wait_time:.2f} seconds (attempt {retries}/{max_retries})")
                    time.sleep(wait_time)

                    # Exponential backoff
                    delay *= 2

        return wrapper
    return decorator


class GeocodingService:
    """Service for turning trip destinations and subtrip locations into map points."""

    def __init__(self, db_service: Optional[DatabaseService] = None, api_key: Optional[str] = None):
        """
        Initialize the geocoding service.

        Args:
            db_service: Database used as the geocoding cache
            api_key: OpenRouteService API key, read from Streamlit secrets when omitted
        """
        self.db_service = db_service or DatabaseService()
        self.api_key = api_key if api_key is not None else get_api_key()

    @retry_with_backoff()
    def _search(self, location_name: str) -> Optional[List[float]]:
        headers = {
            'Accept': 'application/json, application/geo+json',
            'Authorization': self.api_key
        }
        params = {
            'text': location_name,
            'size': 1  # Get only the top result
        }

        response = requests.get(GEOCODE_URL, params=params, headers=headers, timeout=GEOCODE_TIMEOUT)
        response.raise_for_status()
        data = response.json()

        if data.get('features'):
            return data['features'][0]['geometry']['coordinates']
        return None

    def geocode_location(self, location_name: str) -> Optional[List[float]]:
        """
        Convert a location name to coordinates.

        Args:
            location_name (str): Location name (e.g., "Paris, France")

        Returns:
            list: [longitude, latitude] coordinates or None if geocoding failed
        """
        query = (location_name or "").strip()
        if not query:
            return None

        cached = self.db_service.get_geocode(query)
        if cached:
            return cached

        if not self.api_key:
            logger.warning("No OPENROUTE_API_KEY configured, skipping geocoding")
            return None

        try:
            coordinates = self._search(query)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to geocode {query}: {e}")
            return None

        if coordinates is None:
            logger.warning(f"Could not find coordinates for {query}")
            return None

        logger.info(f"Successfully geocoded {query} to coordinates {coordinates}")
        self.db_service.save_geocode(query, coordinates)
        return coordinates

    def map_points(self, locations: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Geocode a list of locations for display on a map.

        Args:
            locations: Dictionaries with at least 'name' and 'color' keys

        Returns:
            List of dictionaries with name, color, latitude and longitude.
            Locations that could not be placed are left out.
        """
        points = []
        for location in locations:
            coordinates = self.geocode_location(location['name'])
            if not coordinates:
                continue
            longitude, latitude = coordinates[0], coordinates[1]
            points.append({**location, 'latitude': latitude, 'longitude': longitude})
        return points
