"""Joining stored readings with their completion state."""

from __future__ import annotations

import datetime as _dt
from typing import Iterable
import uuid

from .models import BundleReading, DailyReadingsBundle, Reading, ReadingProgress


def build_bundle(
    date: str, readings: Iterable[Reading], progress: Iterable[ReadingProgress]
) -> DailyReadingsBundle:
    """Return the :class:`DailyReadingsBundle` for ``date``.

    Readings without a progress entry are reported as not completed. Progress
    entries whose reading is unknown are ignored.
    """

    completed = {p.reading_id: p.completed for p in progress}
    readings = list(readings)
    items = [
        BundleReading(
            id=r.id,
            title=r.title,
            url=r.url,
            reading_type=r.reading_type or None,
            completed=completed.get(r.id, False),
        )
        for r in readings
    ]
    # Every reading of a date carries the same feast day.
    feast_day = next((r.feast_day for r in readings if r.feast_day), None)
    return DailyReadingsBundle(date=date, feast_day=feast_day, readings=items)


def apply_progress(
    existing: ReadingProgress | None,
    reading_id: str,
    date: str,
    completed: bool,
    now: _dt.datetime | None = None,
) -> ReadingProgress:
    """Upsert the completion state of ``reading_id`` on ``date``.

    ``existing`` is updated in place when given; otherwise a new entry is
    created. ``completed_at`` is stamped when marking complete and cleared
    when marking incomplete.
    """

    stamp = (now or _dt.datetime.now(_dt.timezone.utc)) if completed else None
    if existing is None:
        return ReadingProgress(
            id=str(uuid.uuid4()),
            reading_id=reading_id,
            date=date,
            completed=completed,
            completed_at=stamp,
        )
    existing.completed = completed
    existing.completed_at = stamp
    return existing


__all__ = ["build_bundle", "apply_progress"]
