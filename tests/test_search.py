"""Tests for event search."""
from calendar_server.models import Event
from calendar_server.search import search_events

EVENTS = [
    Event(id=1, title="Team Standup", date="2024-01-10", time="09:00", description="Daily sync"),
    Event(id=2, title="Dentist", date="2024-02-03", time="14:30", description="Bring X-rays"),
    Event(id=3, title="Lunch", date="2024-01-21", time="12:00"),
]


def _ids(results) -> list[int]:
    return [event.id for event in results]


def test_empty_query_returns_nothing() -> None:
    assert search_events(EVENTS, "") == []


def test_title_match_ignores_case() -> None:
    assert _ids(search_events(EVENTS, "standup")) == [1]
    assert _ids(search_events(EVENTS, "DENT")) == [2]


def test_description_match_ignores_case() -> None:
    assert _ids(search_events(EVENTS, "x-RAYS")) == [2]


def test_date_substring_matches_literally() -> None:
    assert _ids(search_events(EVENTS, "2024-01")) == [1, 3]
    assert _ids(search_events(EVENTS, "-21")) == [3]


def test_no_match_returns_empty() -> None:
    assert search_events(EVENTS, "dinner") == []


def test_results_keep_store_order() -> None:
    assert _ids(search_events(EVENTS, "2024")) == [1, 2, 3]
