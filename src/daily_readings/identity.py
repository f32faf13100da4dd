"""Content-derived reading identities and de-duplication.

Readings have no id on the source page, so one is derived from the
``(title, url)`` pair. Progress recorded against an id therefore survives a
re-fetch as long as the title and link are unchanged.
"""

from __future__ import annotations

import json
from typing import Iterable, Protocol, TypeVar
import uuid

_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://www.oca.org/readings")


class _Titled(Protocol):
    title: str
    url: str


T = TypeVar("T", bound=_Titled)


def reading_identity(title: str, url: str) -> str:
    """Return a stable id for the reading ``(title, url)``."""

    # JSON keeps the pair unambiguous whatever characters the title holds.
    key = json.dumps([title, url], ensure_ascii=False)
    return str(uuid.uuid5(_NAMESPACE, key))


def dedupe_entries(entries: Iterable[T], existing: Iterable[_Titled] = ()) -> list[T]:
    """Drop repeated ``(title, url)`` pairs, keeping the first occurrence.

    Pairs found in ``existing`` (e.g. readings already stored for the date)
    are dropped as well. Running the result through again changes nothing.
    """

    seen = {(item.title, item.url) for item in existing}
    unique: list[T] = []
    for entry in entries:
        key = (entry.title, entry.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


__all__ = ["reading_identity", "dedupe_entries"]
