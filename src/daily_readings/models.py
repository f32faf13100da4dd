"""Data structures shared by the readings pipeline and its stores."""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime as _dt
from typing import Any


@dataclass(frozen=True)
class RawEntry:
    """One reading link as it appears on the source page."""

    title: str
    url: str


@dataclass(frozen=True)
class ParsedPage:
    """Result of parsing a readings page."""

    feast_day: str
    entries: list[RawEntry] = field(default_factory=list)


@dataclass(frozen=True)
class InsertReading:
    """A reading before a store has assigned its id and creation time."""

    date: str
    title: str
    url: str
    reading_type: str | None = None
    feast_day: str | None = None


@dataclass(frozen=True)
class Reading:
    """A stored reading for one calendar date. Never updated in place."""

    id: str
    date: str
    title: str
    url: str
    reading_type: str | None
    feast_day: str | None
    created_at: _dt.datetime


@dataclass
class ReadingProgress:
    """Completion state for one reading on one date."""

    id: str
    reading_id: str
    date: str
    completed: bool
    completed_at: _dt.datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "readingId": self.reading_id,
            "date": self.date,
            "completed": self.completed,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass(frozen=True)
class BundleReading:
    id: str
    title: str
    url: str
    reading_type: str | None
    completed: bool

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "title": self.title, "url": self.url}
        if self.reading_type:
            data["readingType"] = self.reading_type
        data["completed"] = self.completed
        return data


@dataclass(frozen=True)
class DailyReadingsBundle:
    """The view of one date's readings joined with their progress."""

    date: str
    feast_day: str | None
    readings: list[BundleReading]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"date": self.date}
        if self.feast_day:
            data["feastDay"] = self.feast_day
        data["readings"] = [r.to_dict() for r in self.readings]
        return data


__all__ = [
    "RawEntry",
    "ParsedPage",
    "InsertReading",
    "Reading",
    "ReadingProgress",
    "BundleReading",
    "DailyReadingsBundle",
]
