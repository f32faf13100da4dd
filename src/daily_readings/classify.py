"""Keyword classification of reading titles."""

from __future__ import annotations

GOSPEL = "Gospel"
EPISTLE = "Epistle"
VESPERS = "Vespers"

# Checked in order; the first group with a matching keyword wins. "john" is in
# both Gospel and Epistle, so John's epistles are tagged Gospel.
_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (GOSPEL, ("matthew", "mark", "luke", "john")),
    (
        EPISTLE,
        (
            "romans",
            "corinthians",
            "galatians",
            "ephesians",
            "philippians",
            "colossians",
            "thessalonians",
            "timothy",
            "titus",
            "philemon",
            "hebrews",
            "james",
            "peter",
            "john",
            "jude",
            "revelation",
            "acts",
        ),
    ),
    (VESPERS, ("wisdom", "vespers")),
)


def classify_reading(title: str) -> str:
    """Return ``"Gospel"``, ``"Epistle"``, ``"Vespers"`` or ``""`` for ``title``."""

    lower = title.lower()
    for reading_type, keywords in _KEYWORDS:
        if any(word in lower for word in keywords):
            return reading_type
    return ""


__all__ = ["GOSPEL", "EPISTLE", "VESPERS", "classify_reading"]
