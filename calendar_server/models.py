"""
Data models for calendar events and notifications.

This module contains the dataclasses used by the in-process calendar core:
committed events, the form draft, fired notifications and the payload handed
to a notifier.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import typing as t


@dataclass
class Event:
    """A committed calendar event."""
    id: int
    title: str
    date: str  # "YYYY-MM-DD"
    time: str  # "HH:MM"
    description: str = ""
    attachments: list[str] = field(default_factory=list)
    notifications_enabled: bool = True


@dataclass
class EventDraft:
    """In-progress form data; an ``id`` means the draft edits an existing event."""
    title: str = ""
    description: str = ""
    date: str = ""
    time: str = ""
    attachments: list[str] = field(default_factory=list)
    id: t.Optional[int] = None


@dataclass
class FiredNotification:
    """Record of a notification that actually surfaced."""
    id: int
    title: str
    time: datetime


@dataclass
class NotificationPayload:
    """What a notifier is asked to display."""
    title: str
    body: str
    tag: str


# Fields an update patch may carry
EVENT_FIELDS = ("title", "description", "date", "time", "attachments")
