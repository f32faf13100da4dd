"""Retrieval of the OCA readings page.

Two transports are available: a direct request, and a request through a
JSON-wrapping CORS proxy (``{"contents": "<html>..."}``). Both return the raw
page markup and raise :class:`~daily_readings.errors.FetchError` on failure.
"""

from __future__ import annotations

from functools import partial
from typing import Callable
from urllib.parse import quote

import requests  # type: ignore[import-untyped]

from .config import Settings
from .errors import FetchError

DEFAULT_TIMEOUT = (5.0, 20.0)

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
}

PageFetcher = Callable[[], str | bytes]


def fetch_readings_page(url: str, *, timeout: tuple[float, float] = DEFAULT_TIMEOUT) -> bytes:
    """Return the raw HTML bytes of ``url``.

    The body is left undecoded so the parser can honour the page's
    ``<meta charset>``. Network errors, timeouts and non-2xx responses raise
    :class:`FetchError`.
    """

    try:
        resp = requests.get(url, headers=_HEADERS, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"failed to fetch {url}: {exc}") from exc
    return resp.content


def fetch_via_proxy(
    url: str, *, proxy_url: str, timeout: tuple[float, float] = DEFAULT_TIMEOUT
) -> str:
    """Return the HTML of ``url`` fetched through ``proxy_url``.

    ``proxy_url`` is a prefix the encoded target URL is appended to, e.g.
    ``https://api.allorigins.win/get?url=``.
    """

    target = f"{proxy_url}{quote(url, safe='')}"
    try:
        resp = requests.get(target, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as exc:
        raise FetchError(f"failed to fetch {url} via proxy: {exc}") from exc
    except ValueError as exc:
        raise FetchError(f"proxy returned invalid JSON for {url}") from exc

    contents = payload.get("contents") if isinstance(payload, dict) else None
    if not isinstance(contents, str):
        raise FetchError(f"proxy response for {url} has no page contents")
    return contents


def make_fetcher(settings: Settings) -> PageFetcher:
    """Return a no-argument callable retrieving the configured readings page."""

    if settings.proxy_url:
        return partial(
            fetch_via_proxy,
            settings.readings_url,
            proxy_url=settings.proxy_url,
            timeout=settings.timeout,
        )
    return partial(fetch_readings_page, settings.readings_url, timeout=settings.timeout)


__all__ = ["PageFetcher", "fetch_readings_page", "fetch_via_proxy", "make_fetcher"]
