"""
SQLite-backed sync gateway.
Handles connection management and CRUD operations for activity data, and
pushes day snapshots to in-process subscribers after every write.
"""

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Optional, Union

from ..config import DB_PATH
from ..models import Activity
from ..utils.dates import day_key
from ..logger import setup_logger
from .gateway import GatewayError, SubscriptionRegistry, SyncGateway, Unsubscribe, new_activity_id

logger = setup_logger(__name__)


class SQLiteGateway(SyncGateway):
    """
    Sync gateway storing activities in a SQLite file.

    Records are keyed by (user_id, day, id). Ordering within a day follows
    created_at, with the insertion sequence breaking ties.
    """

    def __init__(self, db_path: Union[str, Path] = DB_PATH):
        self.db_path = Path(db_path)
        self._registry = SubscriptionRegistry()
        self._last_timestamp: Optional[datetime] = None
        self.init_db()

    @contextmanager
    def get_connection(self):
        """Context manager for database connections."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init_db(self):
        """Initialize the database with the activities table."""
        with self.get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS activities (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    user_id TEXT NOT NULL,
                    day TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    duration INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_user_day
                ON activities(user_id, day)
            """)
            conn.commit()

    def _now(self) -> datetime:
        now = datetime.now()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def get_day_activities(self, user_id: str, day: date) -> List[Activity]:
        """
        Retrieve the ordered activities of one day.

        Args:
            user_id: Owner of the activities
            day: Calendar day

        Returns:
            Activities ordered by creation time
        """
        with self.get_connection() as conn:
            rows = conn.execute("""
                SELECT id, name, category, duration, created_at, updated_at
                FROM activities
                WHERE user_id = ? AND day = ?
                ORDER BY created_at ASC, seq ASC
            """, (user_id, day_key(day))).fetchall()

        return [Activity.from_dict(dict(row)) for row in rows]

    def get_activity_count(self, user_id: Optional[str] = None) -> int:
        """Get the number of stored activities, optionally for one user."""
        with self.get_connection() as conn:
            if user_id is None:
                cursor = conn.execute("SELECT COUNT(*) FROM activities")
            else:
                cursor = conn.execute("SELECT COUNT(*) FROM activities WHERE user_id = ?", (user_id,))
            return cursor.fetchone()[0]

    def _publish(self, user_id: str, day: date):
        if self._registry.count(user_id, day) == 0:
            return
        try:
            activities = self.get_day_activities(user_id, day)
        except sqlite3.Error as e:
            logger.error(f"Failed to load snapshot for {user_id}/{day_key(day)}: {e}")
            self._registry.publish_error(user_id, day, GatewayError(str(e)))
            return
        self._registry.publish(user_id, day, activities)

    def subscribe(self, user_id, day, on_snapshot, on_error) -> Unsubscribe:
        unsubscribe = self._registry.add(user_id, day, on_snapshot, on_error)
        try:
            activities = self.get_day_activities(user_id, day)
        except sqlite3.Error as e:
            logger.error(f"Initial load failed for {user_id}/{day_key(day)}: {e}")
            on_error(GatewayError(str(e)))
        else:
            on_snapshot(activities)
        return unsubscribe

    async def create(self, user_id, day, draft) -> str:
        activity_id = new_activity_id()
        try:
            with self.get_connection() as conn:
                conn.execute("""
                    INSERT INTO activities
                    (id, user_id, day, name, category, duration, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    activity_id,
                    user_id,
                    day_key(day),
                    draft.name,
                    draft.category,
                    draft.duration,
                    self._now().isoformat(timespec='microseconds'),
                ))
                conn.commit()
        except sqlite3.Error as e:
            raise GatewayError(f"Failed to create activity: {e}") from e

        logger.debug(f"Created activity {activity_id} for {user_id}/{day_key(day)}")
        self._publish(user_id, day)
        return activity_id

    async def update(self, user_id, day, activity_id, draft) -> None:
        try:
            with self.get_connection() as conn:
                cursor = conn.execute("""
                    UPDATE activities
                    SET name = ?, category = ?, duration = ?, updated_at = ?
                    WHERE id = ? AND user_id = ? AND day = ?
                """, (
                    draft.name,
                    draft.category,
                    draft.duration,
                    self._now().isoformat(timespec='microseconds'),
                    activity_id,
                    user_id,
                    day_key(day),
                ))
                conn.commit()
                updated = cursor.rowcount
        except sqlite3.Error as e:
            raise GatewayError(f"Failed to update activity: {e}") from e

        if updated == 0:
            raise GatewayError(f"No document to update: {activity_id}")
        self._publish(user_id, day)

    async def delete(self, user_id, day, activity_id) -> None:
        try:
            with self.get_connection() as conn:
                cursor = conn.execute("""
                    DELETE FROM activities
                    WHERE id = ? AND user_id = ? AND day = ?
                """, (activity_id, user_id, day_key(day)))
                conn.commit()
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            raise GatewayError(f"Failed to delete activity: {e}") from e

        if deleted:
            self._publish(user_id, day)
