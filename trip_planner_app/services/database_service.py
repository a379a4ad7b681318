"""
Database service for the Trip Planner application.
Handles SQLite database operations, initialization, and queries.
"""
import os
import sqlite3
import json
import uuid
from datetime import datetime
from typing import Dict, List, Any, Optional
import logging

from trip_planner_app.config import DB_FILE_PATH

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ["trips", "subtrips", "itinerary_items", "geocodes"]

TRIP_COLUMNS = ["user_id", "title", "destination", "start_date", "end_date",
                "color", "emoji", "description"]
SUBTRIP_COLUMNS = ["trip_id", "location", "start_date", "end_date",
                   "color", "description", "order_index"]
ITEM_COLUMNS = ["trip_id", "subtrip_id", "type", "title", "location", "start_time",
                "end_time", "notes", "cost", "currency"]


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


class DatabaseService:
    """Service for handling SQLite database operations."""

    def __init__(self, db_path=DB_FILE_PATH):
        """
        Initialize the database service.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path

        # Ensure the directory exists
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Initialize the database
        self.initialize_db()

    def initialize_db(self):
        """Initialize the database with required tables if they don't exist."""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute('''
        CREATE TABLE IF NOT EXISTS trips (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            destination TEXT NOT NULL,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            color TEXT,
            emoji TEXT,
            description TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        ''')

        cursor.execute('''
        CREATE TABLE IF NOT EXISTS subtrips (
            id TEXT PRIMARY KEY,
            trip_id TEXT NOT NULL REFERENCES trips(id) ON DELETE CASCADE,
            location TEXT NOT NULL,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            color TEXT,
            description TEXT,
            order_index INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        ''')

        cursor.execute('''
        CREATE TABLE IF NOT EXISTS itinerary_items (
            id TEXT PRIMARY KEY,
            trip_id TEXT NOT NULL REFERENCES trips(id) ON DELETE CASCADE,
            subtrip_id TEXT REFERENCES subtrips(id) ON DELETE SET NULL,
            type TEXT NOT NULL,
            title TEXT NOT NULL,
            location TEXT,
            start_time TEXT NOT NULL,
            end_time TEXT,
            notes TEXT,
            cost REAL,
            currency TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        ''')

        # Geocoding cache
        cursor.execute('''
        CREATE TABLE IF NOT EXISTS geocodes (
            query TEXT PRIMARY KEY,
            coordinates TEXT NOT NULL,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        ''')

        # Create indexes for performance
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_trips_user ON trips(user_id, start_date)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_subtrips_trip ON subtrips(trip_id, start_date)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_items_trip ON itinerary_items(trip_id, start_time)')

        conn.commit()
        conn.close()

        logger.info("Database initialized successfully")

    def _get_connection(self):
        """Get a connection to the SQLite database with foreign keys enforced."""
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def check_setup(self) -> Dict[str, Any]:
        """
        Check that all required tables exist.

        Returns:
            Dict with a success flag, and the missing tables when unsuccessful
        """
        try:
            conn = self._get_connection()
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            existing = {row[0] for row in cursor.fetchall()}
            conn.close()
        except sqlite3.Error as e:
            logger.error(f"Failed to connect to database: {e}", exc_info=True)
            return {
                "success": False,
                "message": "Failed to connect to database",
                "error": str(e)
            }

        missing = [table for table in REQUIRED_TABLES if table not in existing]
        if missing:
            return {
                "success": False,
                "message": "Database tables not found.",
                "missing": missing
            }
        return {"success": True}

    # Generic helpers

    def _insert(self, table: str, columns: List[str], values: Dict[str, Any]) -> Dict[str, Any]:
        timestamp = _now()
        row = {column: values.get(column) for column in columns}
        row["id"] = values.get("id") or str(uuid.uuid4())
        row["created_at"] = timestamp
        row["updated_at"] = timestamp

        names = list(row)
        placeholders = ", ".join("?" for _ in names)

        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute(
            f"INSERT INTO {table} ({', '.join(names)}) VALUES ({placeholders})",
            [row[name] for name in names]
        )
        conn.commit()
        conn.close()

        logger.debug(f"Inserted {table} row {row['id']}")
        return row

    def _update(self, table: str, columns: List[str], row_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fields = {k: v for k, v in updates.items() if k in columns}
        if fields:
            fields["updated_at"] = _now()
            assignments = ", ".join(f"{name} = ?" for name in fields)

            conn = self._get_connection()
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                list(fields.values()) + [row_id]
            )
            conn.commit()
            conn.close()

        return self._get(table, row_id)

    def _get(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_connection()
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()

        cursor.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,))
        result = cursor.fetchone()

        conn.close()
        return dict(result) if result else None

    def _delete(self, table: str, row_id: str) -> bool:
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
        deleted = cursor.rowcount > 0

        conn.commit()
        conn.close()

        logger.info(f"Deleted {table} row {row_id}: {deleted}")
        return deleted

    def _select(self, query: str, params: tuple) -> List[Dict[str, Any]]:
        conn = self._get_connection()
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()

        cursor.execute(query, params)
        results = [dict(row) for row in cursor.fetchall()]

        conn.close()
        return results

    # Trip-related methods

    def create_trip(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a trip.

        Args:
            values: Column values; id and timestamps are generated when missing

        Returns:
            Dict: The stored row
        """
        return self._insert("trips", TRIP_COLUMNS, values)

    def get_trip(self, trip_id: str) -> Optional[Dict[str, Any]]:
        return self._get("trips", trip_id)

    def list_trips(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get all trips of a user ordered by start date.

        Args:
            user_id: Owning user

        Returns:
            List[Dict]: List of trip rows
        """
        return self._select(
            "SELECT * FROM trips WHERE user_id = ? ORDER BY start_date ASC, created_at ASC",
            (user_id,)
        )

    def update_trip(self, trip_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update("trips", TRIP_COLUMNS, trip_id, updates)

    def delete_trip(self, trip_id: str) -> bool:
        """Delete a trip. Its subtrips and itinerary items are removed with it."""
        return self._delete("trips", trip_id)

    # Subtrip-related methods

    def create_subtrip(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return self._insert("subtrips", SUBTRIP_COLUMNS, values)

    def get_subtrip(self, subtrip_id: str) -> Optional[Dict[str, Any]]:
        return self._get("subtrips", subtrip_id)

    def list_subtrips(self, trip_id: str) -> List[Dict[str, Any]]:
        """
        Get the subtrips of a trip, ordered by start date then order index.

        Args:
            trip_id: Owning trip

        Returns:
            List[Dict]: List of subtrip rows
        """
        return self._select(
            "SELECT * FROM subtrips WHERE trip_id = ? ORDER BY start_date ASC, order_index ASC",
            (trip_id,)
        )

    def update_subtrip(self, subtrip_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update("subtrips", SUBTRIP_COLUMNS, subtrip_id, updates)

    def delete_subtrip(self, subtrip_id: str) -> bool:
        return self._delete("subtrips", subtrip_id)

    # Itinerary-related methods

    def create_itinerary_item(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return self._insert("itinerary_items", ITEM_COLUMNS, values)

    def list_itinerary_items(self, trip_id: str) -> List[Dict[str, Any]]:
        """
        Get the itinerary items of a trip ordered by start time.

        Args:
            trip_id: Owning trip

        Returns:
            List[Dict]: List of item rows
        """
        return self._select(
            "SELECT * FROM itinerary_items WHERE trip_id = ? ORDER BY start_time ASC",
            (trip_id,)
        )

    def update_itinerary_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update("itinerary_items", ITEM_COLUMNS, item_id, updates)

    def delete_itinerary_item(self, item_id: str) -> bool:
        return self._delete("itinerary_items", item_id)

    # Geocoding cache

    def get_geocode(self, query: str) -> Optional[List[float]]:
        """
        Get cached coordinates for a location query.

        Args:
            query: Location text as typed by the user

        Returns:
            [longitude, latitude] if cached, None otherwise
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("SELECT coordinates FROM geocodes WHERE query = ?", (query,))
        result = cursor.fetchone()

        conn.close()

        if result:
            return json.loads(result[0])
        return None

    def save_geocode(self, query: str, coordinates: List[float]):
        """
        Save coordinates for a location query.

        Args:
            query: Location text
            coordinates: [longitude, latitude]
        """
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute(
            "INSERT OR REPLACE INTO geocodes (query, coordinates) VALUES (?, ?)",
            (query, json.dumps(coordinates))
        )

        conn.commit()
        conn.close()
