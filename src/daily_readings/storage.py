"""Storage contract for readings and progress, plus an in-memory store."""

from __future__ import annotations

import datetime as _dt
from typing import Protocol

from .identity import reading_identity
from .merge import apply_progress, build_bundle
from .models import DailyReadingsBundle, InsertReading, Reading, ReadingProgress


class Storage(Protocol):
    """Date-keyed persistence of readings and their progress.

    Backends implement the first four methods; the merged bundle is computed
    from them unless a backend has a cheaper way.
    """

    def get_readings_by_date(self, date: str) -> list[Reading]:
        """Return the readings stored for ``date``, unique by title and url."""

    def create_reading(self, reading: InsertReading) -> Reading:
        """Store ``reading`` or return the one already stored with the same
        date, title and url."""

    def get_progress_by_date(self, date: str) -> list[ReadingProgress]:
        """Return every progress entry recorded for ``date``."""

    def update_progress(self, reading_id: str, date: str, completed: bool) -> ReadingProgress:
        """Create or update the progress entry for ``(reading_id, date)``."""

    def get_daily_readings_with_progress(self, date: str) -> DailyReadingsBundle:
        return build_bundle(date, self.get_readings_by_date(date), self.get_progress_by_date(date))


class MemStorage(Storage):
    """Process-local store keyed by content.

    Readings live under ``(date, title, url)`` so inserting the same reading
    twice yields the first stored object, even from concurrent requests.
    """

    def __init__(self) -> None:
        self._readings: dict[tuple[str, str, str], Reading] = {}
        self._progress: dict[tuple[str, str], ReadingProgress] = {}

    def get_readings_by_date(self, date: str) -> list[Reading]:
        return [r for r in list(self._readings.values()) if r.date == date]

    def create_reading(self, reading: InsertReading) -> Reading:
        key = (reading.date, reading.title, reading.url)
        existing = self._readings.get(key)
        if existing is not None:
            return existing
        candidate = Reading(
            id=reading_identity(reading.title, reading.url),
            date=reading.date,
            title=reading.title,
            url=reading.url,
            reading_type=reading.reading_type or None,
            feast_day=reading.feast_day or None,
            created_at=_dt.datetime.now(_dt.timezone.utc),
        )
        # setdefault is atomic, so a racing insert keeps the first reading.
        return self._readings.setdefault(key, candidate)

    def get_progress_by_date(self, date: str) -> list[ReadingProgress]:
        return [p for p in list(self._progress.values()) if p.date == date]

    def update_progress(self, reading_id: str, date: str, completed: bool) -> ReadingProgress:
        key = (reading_id, date)
        entry = self._progress.get(key)
        if entry is None:
            entry = self._progress.setdefault(key, apply_progress(None, reading_id, date, completed))
        return apply_progress(entry, reading_id, date, completed)


__all__ = ["Storage", "MemStorage"]
