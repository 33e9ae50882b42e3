"""Live search over calendar events."""
from __future__ import annotations

import typing as t

from .models import Event


def matches(event: Event, query: str) -> bool:
    """Title and description match case-insensitively; the date matches literally."""
    needle = query.lower()
    return (
        needle in (event.title or "").lower()
        or needle in (event.description or "").lower()
        or query in (event.date or "")
    )


def search_events(events: t.Iterable[Event], query: str) -> list[Event]:
    """Return the events matching ``query``, in their original order.

    An empty query returns no results rather than everything.
    """
    if not query:
        return []
    return [event for event in events if matches(event, query)]
