"""Parsing helpers for the OCA daily readings page.

The page carries one heading with the feast or saint of the day (usually
prefixed with the date, e.g. ``June 1 — Feast of Pentecost``) and a list
section whose anchors link to the individual readings. Classification and
de-duplication happen downstream; this module only extracts what is there.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup  # type: ignore[import-untyped]
from bs4.builder import ParserRejectedMarkup  # type: ignore[import-untyped]

from .errors import ParseError
from .models import ParsedPage, RawEntry

DEFAULT_BASE_URL = "https://www.oca.org"
DEFAULT_HEADING_SELECTOR = "h2"
DEFAULT_ENTRY_SELECTOR = "section ul li a"

# Everything up to the first em/en dash. "â€”" is an em dash decoded as cp1252.
_FEAST_PREFIX_RE = re.compile(r"^.*?(?:—|–|â€”)\s*")


def clean_feast_day(text: str) -> str:
    """Strip a leading date stamp (anything before a dash) from ``text``."""

    return _FEAST_PREFIX_RE.sub("", text.strip(), count=1).strip()


def resolve_url(href: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Return ``href`` as an absolute URL.

    Links that already carry a scheme are returned unchanged; anything else is
    resolved against ``base_url``.
    """

    href = href.strip()
    if urlparse(href).scheme:
        return href
    if not base_url.endswith("/"):
        base_url = base_url + "/"
    return urljoin(base_url, href)


def _collapse(text: str) -> str:
    return " ".join(text.split())


def parse_readings_page(
    markup: str | bytes,
    *,
    base_url: str = DEFAULT_BASE_URL,
    heading_selector: str = DEFAULT_HEADING_SELECTOR,
    entry_selector: str = DEFAULT_ENTRY_SELECTOR,
) -> ParsedPage:
    """Extract the feast day and the raw reading links from ``markup``.

    Entries come back in document order, one per anchor with non-empty text
    and ``href``. A page without the expected heading or list is not an error:
    the feast day is ``""`` and/or the entry list is empty.

    :class:`ParseError` is raised only when ``markup`` is not text, is empty,
    or is rejected by the HTML parser.
    """

    if not isinstance(markup, (str, bytes)):
        raise ParseError(f"expected markup text, got {type(markup).__name__}")
    if not markup.strip():
        raise ParseError("empty document")

    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(f"unparseable markup: {exc}") from exc

    heading = soup.select_one(heading_selector)
    feast_day = clean_feast_day(_collapse(heading.get_text(" "))) if heading else ""

    entries: list[RawEntry] = []
    for link in soup.select(entry_selector):
        title = _collapse(link.get_text(" "))
        href = (link.get("href") or "").strip()
        if not title or not href:
            continue
        entries.append(RawEntry(title=title, url=resolve_url(href, base_url)))

    return ParsedPage(feast_day=feast_day, entries=entries)


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_HEADING_SELECTOR",
    "DEFAULT_ENTRY_SELECTOR",
    "clean_feast_day",
    "resolve_url",
    "parse_readings_page",
]
