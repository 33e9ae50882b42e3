"""Create/edit form for calendar events.

One shared draft serves both modes. The form is closed until a day is picked
(create) or an existing event is opened (edit), and it closes again on
cancel, on a successful submit, or on delete.
"""
from __future__ import annotations

import logging
import typing as t
from dataclasses import asdict, replace
from enum import Enum

from .models import Event, EventDraft

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "date", "time")


class FormState(Enum):
    """State of the event form."""
    CLOSED = "CLOSED"
    CREATE = "CREATE"
    EDIT = "EDIT"


class EventForm:
    """Holds the draft and decides whether a submission creates or updates.

    ``on_create``, ``on_update`` and ``on_delete`` are the mutations the form
    dispatches to; the controller wires them to the store.
    """

    def __init__(
            self,
            on_create: t.Callable[[EventDraft], t.Any],
            on_update: t.Callable[[int, dict[str, t.Any]], t.Any],
            on_delete: t.Callable[[int], t.Any]
    ) -> None:
        self.on_create = on_create
        self.on_update = on_update
        self.on_delete = on_delete
        self.state = FormState.CLOSED
        self.draft = EventDraft()

    @property
    def is_open(self) -> bool:
        return self.state is not FormState.CLOSED

    def open_for_date(self, date: str) -> EventDraft:
        """Open in create mode with ``date`` filled in.

        Whatever else the draft already held is kept, as clicking another day
        only changes the date.
        """
        self.draft = replace(self.draft, date=date, id=None)
        self.state = FormState.CREATE
        return self.draft

    def open_for_edit(self, event: Event) -> EventDraft:
        data = asdict(event)
        data.pop("notifications_enabled", None)
        self.draft = EventDraft(**data)
        self.state = FormState.EDIT
        return self.draft

    def set_field(self, name: str, value: str) -> None:
        if name not in ("title", "description", "date", "time"):
            raise ValueError(f"Unknown form field: {name}")
        setattr(self.draft, name, value)

    def add_attachment(self, handle: str) -> None:
        self.draft.attachments = [*self.draft.attachments, handle]

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self.draft, name)]

    def is_valid(self) -> bool:
        return not self.missing_fields()

    def submit(self) -> bool:
        """Create or update from the draft.

        Returns False when the submission is blocked by a missing required
        field; a blocked form stays open with its draft intact.
        """
        if not self.is_open:
            return False
        missing = self.missing_fields()
        if missing:
            logger.debug("Form submission blocked, missing %s", missing)
            return False

        if self.draft.id is not None:
            patch = asdict(self.draft)
            event_id = patch.pop("id")
            self.on_update(event_id, patch)
        else:
            self.on_create(self.draft)
        self._close()
        return True

    def delete(self) -> bool:
        """Delete the event being edited. Only available in edit mode."""
        if self.state is not FormState.EDIT or self.draft.id is None:
            return False
        self.on_delete(self.draft.id)
        self._close()
        return True

    def cancel(self) -> None:
        self._close()

    def _close(self) -> None:
        self.state = FormState.CLOSED
        self.draft = EventDraft()
