"""SQLite implementation of the :class:`~daily_readings.storage.Storage` contract.

Database location comes from ``READINGS_DB_PATH`` (see :mod:`daily_readings.config`)
or the path given to :class:`SqliteStorage`. A connection is opened per call so
the store can be shared between request threads.
"""

from __future__ import annotations

from contextlib import closing, contextmanager
import datetime as _dt
from pathlib import Path
import sqlite3
from typing import Iterator

from .identity import reading_identity
from .merge import apply_progress
from .models import InsertReading, Reading, ReadingProgress
from .storage import Storage

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS readings (
        id TEXT NOT NULL,
        date TEXT NOT NULL,
        title TEXT NOT NULL,
        url TEXT NOT NULL,
        reading_type TEXT,
        feast_day TEXT,
        created_at TEXT NOT NULL,
        PRIMARY KEY (date, id),
        UNIQUE (date, title, url)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reading_progress (
        id TEXT PRIMARY KEY,
        reading_id TEXT NOT NULL,
        date TEXT NOT NULL,
        completed INTEGER NOT NULL DEFAULT 0,
        completed_at TEXT,
        UNIQUE (reading_id, date)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_progress_date ON reading_progress(date)",
)


def _parse_ts(value: str | None) -> _dt.datetime | None:
    return _dt.datetime.fromisoformat(value) if value else None


def _row_to_reading(row: sqlite3.Row) -> Reading:
    return Reading(
        id=row["id"],
        date=row["date"],
        title=row["title"],
        url=row["url"],
        reading_type=row["reading_type"],
        feast_day=row["feast_day"],
        created_at=_dt.datetime.fromisoformat(row["created_at"]),
    )


def _row_to_progress(row: sqlite3.Row) -> ReadingProgress:
    return ReadingProgress(
        id=row["id"],
        reading_id=row["reading_id"],
        date=row["date"],
        completed=bool(row["completed"]),
        completed_at=_parse_ts(row["completed_at"]),
    )


class SqliteStorage(Storage):
    """Readings and progress kept in two SQLite tables.

    ``UNIQUE (date, title, url)`` makes :meth:`create_reading` idempotent and
    ``UNIQUE (reading_id, date)`` backs the progress upsert.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.init_schema()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(self.path, timeout=10.0)) as conn:
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn

    def init_schema(self) -> None:
        """Create the tables if they do not exist yet."""

        with self._connect() as conn:
            for statement in _SCHEMA:
                conn.execute(statement)

    def get_readings_by_date(self, date: str) -> list[Reading]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM readings WHERE date = ? ORDER BY rowid", (date,)
            ).fetchall()
        return [_row_to_reading(row) for row in rows]

    def create_reading(self, reading: InsertReading) -> Reading:
        created = Reading(
            id=reading_identity(reading.title, reading.url),
            date=reading.date,
            title=reading.title,
            url=reading.url,
            reading_type=reading.reading_type or None,
            feast_day=reading.feast_day or None,
            created_at=_dt.datetime.now(_dt.timezone.utc),
        )
        with self._connect() as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO readings
                        (id, date, title, url, reading_type, feast_day, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        created.id,
                        created.date,
                        created.title,
                        created.url,
                        created.reading_type,
                        created.feast_day,
                        created.created_at.isoformat(),
                    ),
                )
                return created
            except sqlite3.IntegrityError:
                # Already stored for this date; hand back the stored row.
                row = conn.execute(
                    "SELECT * FROM readings WHERE date = ? AND title = ? AND url = ?",
                    (reading.date, reading.title, reading.url),
                ).fetchone()
        return _row_to_reading(row)

    def get_progress_by_date(self, date: str) -> list[ReadingProgress]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM reading_progress WHERE date = ? ORDER BY rowid", (date,)
            ).fetchall()
        return [_row_to_progress(row) for row in rows]

    def update_progress(self, reading_id: str, date: str, completed: bool) -> ReadingProgress:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM reading_progress WHERE reading_id = ? AND date = ?",
                (reading_id, date),
            ).fetchone()
            entry = apply_progress(
                _row_to_progress(row) if row is not None else None, reading_id, date, completed
            )
            conn.execute(
                """
                INSERT INTO reading_progress (id, reading_id, date, completed, completed_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (reading_id, date) DO UPDATE SET
                    completed = excluded.completed,
                    completed_at = excluded.completed_at
                """,
                (
                    entry.id,
                    entry.reading_id,
                    entry.date,
                    int(entry.completed),
                    entry.completed_at.isoformat() if entry.completed_at else None,
                ),
            )
            row = conn.execute(
                "SELECT * FROM reading_progress WHERE reading_id = ? AND date = ?",
                (reading_id, date),
            ).fetchone()
        return _row_to_progress(row)


__all__ = ["SqliteStorage"]
