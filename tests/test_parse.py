from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pytest

from daily_readings.errors import ParseError
from daily_readings.models import RawEntry
from daily_readings.parse import clean_feast_day, parse_readings_page, resolve_url


def read_fixture(name: str) -> str:
    path = Path(__file__).resolve().parents[1] / "fixtures" / "oca" / name
    return path.read_text(encoding="utf-8")


def test_parse_fixture_feast_day_and_entries() -> None:
    page = parse_readings_page(read_fixture("sample_1.html"))
    assert page.feast_day == "Sunday of the Holy Fathers of the First Ecumenical Council"
    titles = [e.title for e in page.entries]
    # Navigation links outside the readings section are ignored, empty ones dropped,
    # and duplicates are left for the resolver.
    assert titles == [
        "Acts 20:16-18, 28-36",
        "John 17:1-13",
        "Wisdom of Solomon 3:1-9 (Vespers)",
        "John 17:1-13",
        "Genesis 14:14-20",
    ]
    assert page.entries[0].url == "https://www.oca.org/readings/daily/2025/06/01/1"
    assert page.entries[2].url == "https://www.oca.org/readings/daily/2025/06/01/3"


def test_parse_pentecost_example() -> None:
    html = (
        "<html><body><h2>June 1 — Feast of Pentecost</h2>"
        "<section><ul><li><a href='/readings/acts-2'>Acts 2:1-11</a></li></ul></section>"
        "</body></html>"
    )
    page = parse_readings_page(html)
    assert page.feast_day == "Feast of Pentecost"
    assert page.entries == [
        RawEntry(title="Acts 2:1-11", url="https://www.oca.org/readings/acts-2")
    ]


def test_parse_missing_sections_is_not_an_error() -> None:
    page = parse_readings_page("<html><body><p>Site maintenance</p></body></html>")
    assert page.feast_day == ""
    assert page.entries == []


def test_parse_custom_base_url_and_selectors() -> None:
    html = "<h1>Today</h1><div class='r'><a href='x/1'>Luke 1:1</a></div>"
    page = parse_readings_page(
        html,
        base_url="https://example.org/readings",
        heading_selector="h1",
        entry_selector="div.r a",
    )
    assert page.feast_day == "Today"
    assert page.entries[0].url == "https://example.org/readings/x/1"


@pytest.mark.parametrize("bad", [None, 42, "", "   \n  "])
def test_parse_rejects_non_markup(bad) -> None:
    with pytest.raises(ParseError):
        parse_readings_page(bad)


def test_parse_accepts_bytes() -> None:
    page = parse_readings_page("<h2>May 2 — St Athanasius</h2>".encode("utf-8"))
    assert page.feast_day == "St Athanasius"


def test_clean_feast_day_variants() -> None:
    assert clean_feast_day("June 1 — Feast of Pentecost") == "Feast of Pentecost"
    assert clean_feast_day("June 1 – Feast of Pentecost") == "Feast of Pentecost"
    assert clean_feast_day("June 1 â€” Feast of Pentecost") == "Feast of Pentecost"
    assert clean_feast_day("  Feast of Pentecost ") == "Feast of Pentecost"
    # Only the first dash-delimited prefix goes.
    assert clean_feast_day("A — B — C") == "B — C"


def test_resolve_url() -> None:
    assert resolve_url("/readings/x") == "https://www.oca.org/readings/x"
    assert resolve_url("readings/x") == "https://www.oca.org/readings/x"
    assert resolve_url("https://other.org/y") == "https://other.org/y"
    assert resolve_url("http://other.org/y") == "http://other.org/y"
