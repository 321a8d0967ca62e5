import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from booking_api.core.errors import StorageError
from booking_api.core.logger import logger
from booking_api.models.booking_models import BOOKING_FIELDS, BookingRecord

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS demo_bookings (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        phone TEXT,
        organization TEXT,
        org_type TEXT,
        preferred_date TEXT,
        preferred_time_slot TEXT,
        message TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
"""

INSERT_SQL = f"""
    INSERT INTO demo_bookings ({", ".join(BOOKING_FIELDS)}, created_at)
    VALUES ({", ".join("?" for _ in BOOKING_FIELDS)}, ?)
"""

# SQLite's CURRENT_TIMESTAMP layout (UTC) with microseconds
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

SELECT_ALL_SQL = "SELECT * FROM demo_bookings ORDER BY created_at DESC, id DESC"


class BookingStore:
    """
    SQLite-backed store for demo bookings.

    One connection is shared by every request thread; the lock serializes all
    access, so ids come out strictly increasing and readers never see a
    half-written row.
    """

    def __init__(self, path: str):
        self.path = path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def open(self):
        """Connects and creates the table if missing. Safe to call repeatedly."""
        with self._lock:
            try:
                if self._conn is None:
                    self._conn = sqlite3.connect(self.path, check_same_thread=False)
                    self._conn.row_factory = sqlite3.Row
                    logger.info(f"✅ Connected to SQLite database: {self.path}")
                self._conn.execute(CREATE_TABLE_SQL)
                self._conn.commit()
                logger.info("✅ Database table ready")
            except sqlite3.Error as e:
                logger.error(f"❌ Error opening database: {e}")
                raise StorageError(str(e)) from e

    def close(self):
        # Taking the lock lets in-flight create/list calls finish first
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
                logger.info("🛑 Database connection closed")
            except sqlite3.Error as e:
                logger.error(f"❌ Error closing database: {e}")
            finally:
                self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("Database is not open")
        return self._conn

    def create(self, fields: Dict[str, Any]) -> int:
        """
        Inserts a booking and returns its id.
        created_at is stamped here, inside the lock, so it follows id order.
        """
        values = [fields.get(name) for name in BOOKING_FIELDS]
        with self._lock:
            conn = self._connection()
            try:
                created_at = datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)
                cursor = conn.execute(INSERT_SQL, (*values, created_at))
                conn.commit()
                return cursor.lastrowid
            except sqlite3.Error as e:
                conn.rollback()
                logger.error(f"❌ Database error (create): {e}")
                raise StorageError(str(e)) from e

    def list_all(self) -> List[BookingRecord]:
        """Returns every booking, newest first."""
        with self._lock:
            conn = self._connection()
            try:
                rows = conn.execute(SELECT_ALL_SQL).fetchall()
            except sqlite3.Error as e:
                logger.error(f"❌ Database error (list_all): {e}")
                raise StorageError(str(e)) from e

        try:
            return [BookingRecord(**dict(row)) for row in rows]
        except ValidationError as e:
            logger.error(f"❌ Unreadable booking row in demo_bookings: {e}")
            raise StorageError("Unreadable booking row") from e
