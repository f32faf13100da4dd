"""Once-a-day fetching of the readings list.

The store doubles as the cache: a date with stored readings is a hit and is
served without touching the network. A miss runs one fetch, parse, classify
and de-duplicate cycle and persists the result. Failures store nothing, so
the next request simply retries.
"""

from __future__ import annotations

import datetime as _dt
import logging
from typing import Callable

from .classify import classify_reading
from .config import Settings
from .errors import FetchError, ParseError
from .identity import dedupe_entries
from .models import DailyReadingsBundle, InsertReading, Reading
from .parse import parse_readings_page
from .scrape import PageFetcher
from .storage import Storage

logger = logging.getLogger(__name__)

Clock = Callable[[_dt.tzinfo], _dt.datetime]


def _now(tz: _dt.tzinfo) -> _dt.datetime:
    return _dt.datetime.now(tz)


class DailyReadingsCache:
    """Ensures the readings for a date are fetched at most once.

    Concurrent misses may both fetch; :meth:`Storage.create_reading` is
    idempotent on ``(date, title, url)`` so the store still ends up with one
    reading per pair.
    """

    def __init__(
        self,
        store: Storage,
        fetch_page: PageFetcher,
        settings: Settings | None = None,
        *,
        clock: Clock = _now,
    ) -> None:
        self.store = store
        self.fetch_page = fetch_page
        self.settings = settings or Settings()
        self._clock = clock

    def today(self) -> str:
        """Return today's ISO date in the configured reference timezone."""

        return self._clock(self.settings.tzinfo).date().isoformat()

    def is_cached(self, date: str) -> bool:
        return bool(self.store.get_readings_by_date(date))

    def ensure_today(self) -> list[Reading]:
        return self.ensure_date(self.today())

    def ensure_date(self, date: str) -> list[Reading]:
        """Return the stored readings for ``date``, fetching them on a miss.

        Raises :class:`FetchError` when the page cannot be retrieved or parsed.
        """

        stored = self.store.get_readings_by_date(date)
        if stored:
            logger.debug("readings for %s served from store (%d)", date, len(stored))
            return stored

        logger.info("no readings stored for %s; fetching source page", date)
        markup = self.fetch_page()
        try:
            page = parse_readings_page(
                markup,
                base_url=self.settings.base_url,
                heading_selector=self.settings.heading_selector,
                entry_selector=self.settings.entry_selector,
            )
        except ParseError as exc:
            raise FetchError(f"could not parse readings page: {exc}") from exc

        if not page.entries:
            logger.warning("readings page for %s had no reading links", date)
            return []

        # Re-read: a concurrent request may have stored readings meanwhile.
        entries = dedupe_entries(page.entries, existing=self.store.get_readings_by_date(date))
        stored_count = 0
        try:
            for entry in entries:
                self.store.create_reading(
                    InsertReading(
                        date=date,
                        title=entry.title,
                        url=entry.url,
                        reading_type=classify_reading(entry.title) or None,
                        feast_day=page.feast_day or None,
                    )
                )
                stored_count += 1
        except Exception:
            logger.error(
                "storing readings for %s failed after %d of %d entries",
                date,
                stored_count,
                len(entries),
            )
            raise
        logger.info(
            "stored %d readings for %s (%d links on page)", len(entries), date, len(page.entries)
        )
        return self.store.get_readings_by_date(date)

    def get_bundle(self, date: str | None = None) -> DailyReadingsBundle:
        """Ensure ``date`` (default today) is cached and return its bundle."""

        date = date or self.today()
        self.ensure_date(date)
        return self.store.get_daily_readings_with_progress(date)


__all__ = ["DailyReadingsCache"]
