"""Runtime settings read from the environment.

Every setting has a default so the app starts without any configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
import datetime as _dt
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .parse import DEFAULT_BASE_URL, DEFAULT_ENTRY_SELECTOR, DEFAULT_HEADING_SELECTOR

DEFAULT_READINGS_URL = "https://www.oca.org/readings"


@dataclass(frozen=True)
class Settings:
    readings_url: str = DEFAULT_READINGS_URL
    base_url: str = DEFAULT_BASE_URL
    timezone: str = "UTC"
    connect_timeout: float = 5.0
    read_timeout: float = 20.0
    proxy_url: str | None = None
    db_path: str | None = None
    heading_selector: str = DEFAULT_HEADING_SELECTOR
    entry_selector: str = DEFAULT_ENTRY_SELECTOR

    @property
    def timeout(self) -> tuple[float, float]:
        """``(connect, read)`` timeout for :mod:`requests`."""
        return (self.connect_timeout, self.read_timeout)

    @property
    def tzinfo(self) -> _dt.tzinfo:
        """Reference timezone that decides which calendar day is "today"."""
        if self.timezone.upper() == "UTC":
            return _dt.timezone.utc
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``READINGS_*`` environment variables.

        Raises :class:`ValueError` for an unknown timezone or a non-numeric
        timeout.
        """

        tz = os.getenv("READINGS_TZ", "UTC")
        try:
            cls(timezone=tz).tzinfo
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone READINGS_TZ={tz!r}") from exc

        return cls(
            readings_url=os.getenv("READINGS_URL", DEFAULT_READINGS_URL),
            base_url=os.getenv("READINGS_BASE_URL", DEFAULT_BASE_URL),
            timezone=tz,
            connect_timeout=float(os.getenv("READINGS_CONNECT_TIMEOUT", "5")),
            read_timeout=float(os.getenv("READINGS_READ_TIMEOUT", "20")),
            proxy_url=os.getenv("READINGS_PROXY_URL") or None,
            db_path=os.getenv("READINGS_DB_PATH") or None,
            heading_selector=os.getenv("READINGS_HEADING_SELECTOR", DEFAULT_HEADING_SELECTOR),
            entry_selector=os.getenv("READINGS_ENTRY_SELECTOR", DEFAULT_ENTRY_SELECTOR),
        )


__all__ = ["DEFAULT_READINGS_URL", "Settings"]
