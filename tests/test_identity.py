from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from daily_readings.identity import dedupe_entries, reading_identity
from daily_readings.models import RawEntry


CORPUS = [
    ("Acts 2:1-11", "https://www.oca.org/readings/acts-2"),
    ("Acts 2:1-11", "https://www.oca.org/readings/acts-2b"),
    ("Acts 2:1-12", "https://www.oca.org/readings/acts-2"),
    ("John 7:37-52", "https://www.oca.org/readings/john-7"),
    ("a-b", "c"),
    ("a", "b-c"),
]


def test_identity_is_deterministic() -> None:
    for title, url in CORPUS:
        assert reading_identity(title, url) == reading_identity(title, url)


def test_identity_distinct_for_distinct_pairs() -> None:
    ids = {reading_identity(title, url) for title, url in CORPUS}
    assert len(ids) == len(CORPUS)


def test_dedupe_keeps_first_occurrence() -> None:
    a1 = RawEntry("John 17:1-13", "https://www.oca.org/r/2")
    b = RawEntry("Acts 20:16-18", "https://www.oca.org/r/1")
    a2 = RawEntry("John 17:1-13", "https://www.oca.org/r/2")
    result = dedupe_entries([b, a1, a2])
    assert result == [b, a1]
    assert result[1] is a1


def test_dedupe_same_title_different_url_are_kept() -> None:
    entries = [
        RawEntry("John 17:1-13", "https://www.oca.org/r/2"),
        RawEntry("John 17:1-13", "https://www.oca.org/r/3"),
        RawEntry("John 17:1-14", "https://www.oca.org/r/2"),
    ]
    assert dedupe_entries(entries) == entries


def test_dedupe_is_idempotent() -> None:
    entries = [RawEntry(t, u) for t, u in CORPUS + CORPUS[::-1] + CORPUS[:2]]
    once = dedupe_entries(entries)
    assert dedupe_entries(once) == once
    assert len(once) == len(CORPUS)


def test_dedupe_against_existing() -> None:
    stored = [RawEntry("Acts 2:1-11", "https://www.oca.org/readings/acts-2")]
    entries = [
        RawEntry("Acts 2:1-11", "https://www.oca.org/readings/acts-2"),
        RawEntry("John 7:37-52", "https://www.oca.org/readings/john-7"),
    ]
    assert dedupe_entries(entries, existing=stored) == entries[1:]
