# -*- coding: utf-8 -*-
"""Tests for the in-memory event store."""
from calendar_server.models import EventDraft
from calendar_server.store import EventStore


def _draft(**overrides) -> EventDraft:
    values = {"title": "Standup", "date": "2024-01-10", "time": "09:00"}
    values.update(overrides)
    return EventDraft(**values)


def test_create_adds_exactly_one_retrievable_event() -> None:
    store = EventStore()
    event = store.create(_draft(description="daily", attachments=["notes.pdf"]))

    assert len(store) == 1
    assert store.get(event.id) == event
    assert event.title == "Standup"
    assert event.description == "daily"
    assert event.attachments == ["notes.pdf"]
    assert event.notifications_enabled is True


def test_create_ignores_draft_id_and_assigns_increasing_ids() -> None:
    store = EventStore()
    first = store.create(_draft(id=7))
    second = store.create(_draft(title="Retro"))

    assert first.id != 7
    assert second.id > first.id
    assert [e.title for e in store.all_events()] == ["Standup", "Retro"]


def test_create_does_not_validate() -> None:
    """Required fields are the form's concern; the store takes anything."""
    store = EventStore()
    event = store.create(EventDraft())

    assert store.get(event.id).title == ""


def test_create_copies_attachments() -> None:
    store = EventStore()
    draft = _draft(attachments=["a.txt"])
    event = store.create(draft)
    draft.attachments.append("b.txt")

    assert event.attachments == ["a.txt"]


def test_update_merges_patch_and_keeps_other_fields() -> None:
    store = EventStore()
    event = store.create(_draft(description="daily"))
    other = store.create(_draft(title="Retro"))

    store.update(event.id, {"time": "10:00", "id": 999, "bogus": True})

    updated = store.get(event.id)
    assert updated.id == event.id
    assert updated.time == "10:00"
    assert updated.title == "Standup"
    assert updated.description == "daily"
    assert updated.notifications_enabled is True
    assert store.get(other.id) == other


def test_update_restamps_notifications_enabled() -> None:
    store = EventStore()
    event = store.create(_draft())
    event.notifications_enabled = False

    store.update(event.id, {})

    assert store.get(event.id).notifications_enabled is True


def test_update_unknown_id_is_a_noop() -> None:
    store = EventStore()
    event = store.create(_draft())

    store.update(event.id + 1, {"title": "Changed"})

    assert store.all_events() == [event]


def test_delete_removes_only_the_match() -> None:
    store = EventStore()
    keep = store.create(_draft(title="Keep"))
    drop = store.create(_draft(title="Drop"))

    store.delete(drop.id)

    assert store.all_events() == [keep]
    assert store.get(drop.id) is None


def test_delete_unknown_id_is_a_noop() -> None:
    store = EventStore()
    event = store.create(_draft())

    store.delete(event.id + 1)

    assert store.all_events() == [event]


def test_events_on_filters_by_date() -> None:
    store = EventStore()
    store.create(_draft(date="2024-01-10"))
    other = store.create(_draft(date="2024-01-11"))

    assert store.events_on("2024-01-11") == [other]
    store.clear()
    assert len(store) == 0
