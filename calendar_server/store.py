# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import time
import typing as t
from dataclasses import replace

from .models import EVENT_FIELDS, Event, EventDraft

logger = logging.getLogger(__name__)


class EventStore:
    """In-memory storage for calendar events.

    Lives as long as the process does. The store accepts whatever it is
    handed; required-field checks belong to the form and request layers.
    """

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._events)

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped when two creates land in the same ms
        candidate = int(time.time() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def create(self, draft: EventDraft) -> Event:
        """Adds an event built from a draft.

        :param draft: The form data for the new event. Its ``id`` is ignored.
        :return: The stored Event with its assigned id.
        """
        event = Event(
            id=self._next_id(),
            title=draft.title,
            description=draft.description,
            date=draft.date,
            time=draft.time,
            attachments=list(draft.attachments),
            notifications_enabled=True,
        )
        self._events.append(event)
        logger.debug("Created event %s (%s)", event.id, event.title)
        return event

    def update(self, event_id: int, patch: dict[str, t.Any]) -> None:
        """Merges ``patch`` over the matching event.

        Unknown ids are ignored. Keys outside the editable fields, ``id``
        included, are dropped.
        """
        changes = {key: value for key, value in patch.items() if key in EVENT_FIELDS}
        for idx, event in enumerate(self._events):
            if event.id == event_id:
                self._events[idx] = replace(event, **changes, notifications_enabled=True)
                logger.debug("Updated event %s fields=%s", event_id, sorted(changes))
                return
        logger.debug("Update ignored, no event %s", event_id)

    def delete(self, event_id: int) -> None:
        """Removes the matching event. Unknown ids are ignored."""
        before = len(self._events)
        self._events = [event for event in self._events if event.id != event_id]
        if len(self._events) == before:
            logger.debug("Delete ignored, no event %s", event_id)

    def get(self, event_id: int) -> t.Optional[Event]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def all_events(self) -> list[Event]:
        """Returns all events in insertion order."""
        return list(self._events)

    def events_on(self, date: str) -> list[Event]:
        return [event for event in self._events if event.date == date]

    def clear(self) -> None:
        self._events.clear()
