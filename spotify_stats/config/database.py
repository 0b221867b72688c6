"""Database management for Spotify Stats."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from ..errors import PersistenceError
from ..models.track import Track


def local_now() -> datetime:
    """Current local time with its UTC offset, so DST changes never step back."""
    return datetime.now().astimezone()


def as_aware(value: datetime) -> datetime:
    """Attach the local UTC offset to naive timestamps (older rows, naive clocks)."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


class HistoryStore:
    """Append-only SQLite log of played songs."""

    def __init__(self, db_path: Path, clock: Optional[Callable[[], datetime]] = None):
        """Initialize the history store.

        Args:
            db_path: Path to SQLite database file (created if absent)
            clock: Returns the timestamp for new records (default: local_now)

        Raises:
            PersistenceError: If the database cannot be created or opened
        """
        self.db_path = Path(db_path)
        self._clock = clock or local_now
        self._last_timestamp: Optional[datetime] = None

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create database directory {self.db_path.parent}: {e}") from e

        self.init_database()

    @contextmanager
    def get_connection(self):
        """Context manager for database connections.

        Commits on success, rolls back on error. SQLite and OS errors are
        re-raised as PersistenceError.

        Yields:
            sqlite3.Connection: Database connection
        """
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            conn.rollback()
            raise PersistenceError(f"Database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_database(self) -> None:
        """Initialize database schema."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS songs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TIMESTAMP NOT NULL,
                    artist TEXT NOT NULL,
                    title TEXT NOT NULL
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_songs_artist ON songs(artist)")

    @staticmethod
    def _row_to_track(row: sqlite3.Row) -> Track:
        return Track(
            id=row['id'],
            timestamp=as_aware(datetime.fromisoformat(row['timestamp'])),
            artist=row['artist'],
            title=row['title']
        )

    def _next_timestamp(self, cursor: sqlite3.Cursor) -> datetime:
        """Timestamp for a new record, never earlier than the latest stored one.

        Offsets are compared, so only a real clock correction is clamped.
        """
        if self._last_timestamp is None:
            cursor.execute("SELECT timestamp FROM songs ORDER BY id DESC LIMIT 1")
            row = cursor.fetchone()
            if row:
                self._last_timestamp = as_aware(datetime.fromisoformat(row['timestamp']))

        now = as_aware(self._clock())
        if self._last_timestamp is not None and now < self._last_timestamp:
            now = self._last_timestamp
        return now

    def append(self, artist: str, title: str) -> Track:
        """Record a play.

        The record is committed before this returns.

        Args:
            artist: Non-empty artist name
            title: Non-empty song title

        Returns:
            The stored Track with its assigned id and timestamp

        Raises:
            ValueError: If artist or title is empty
            PersistenceError: If the write fails
        """
        artist = artist.strip()
        title = title.strip()
        if not artist or not title:
            raise ValueError("artist and title must be non-empty")

        with self.get_connection() as conn:
            cursor = conn.cursor()
            timestamp = self._next_timestamp(cursor)
            cursor.execute(
                "INSERT INTO songs (timestamp, artist, title) VALUES (?, ?, ?)",
                (timestamp.isoformat(), artist, title)
            )
            track_id = cursor.lastrowid

        self._last_timestamp = timestamp
        return Track(id=track_id, timestamp=timestamp, artist=artist, title=title)

    def all(self) -> List[Track]:
        """Get the full history in append order.

        Returns:
            List of Track objects, oldest first
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM songs ORDER BY id")
            return [self._row_to_track(row) for row in cursor.fetchall()]

    def recent(self, limit: int = 20) -> List[Track]:
        """Get the most recent records.

        Args:
            limit: Maximum number of records

        Returns:
            List of Track objects, oldest first
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM songs ORDER BY id DESC LIMIT ?", (limit,))
            rows = cursor.fetchall()

        return [self._row_to_track(row) for row in reversed(rows)]

    def last(self) -> Optional[Track]:
        """Get the most recently appended record, if any."""
        tracks = self.recent(1)
        return tracks[0] if tracks else None

    def count(self) -> int:
        """Get the number of recorded plays."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS count FROM songs")
            return cursor.fetchone()['count']
