"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the calendar dataclasses, ensuring
consistent JSON serialization between the calendar service and its clients.
"""
from __future__ import annotations

import typing as t
from datetime import datetime

from pydantic import BaseModel, Field


PermissionState = t.Literal["default", "granted", "denied"]


class Event(BaseModel):
    """A committed calendar event."""
    id: int
    title: str
    date: str                                       # "YYYY-MM-DD"
    time: str                                       # "HH:MM"
    description: str = ""
    attachments: list[str] = Field(default_factory=list)
    notifications_enabled: bool = True


class FiredNotification(BaseModel):
    """A notification that surfaced at event time."""
    id: int
    title: str
    time: datetime


class CalendarDay(BaseModel):
    """One day of the month grid with the events on it."""
    day: int
    date: str
    events: list[Event] = Field(default_factory=list)


class MonthGrid(BaseModel):
    """The current month, day by day."""
    year: int
    month: int
    title: str
    headers: list[str]
    leading_blanks: int
    days: list[CalendarDay] = Field(default_factory=list)


# Request/Response Models for API endpoints
class CreateEventRequest(BaseModel):
    """Request model for creating an event. Title, date and time must be non-empty."""
    title: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)
    description: str = ""
    attachments: list[str] = Field(default_factory=list)


class UpdateEventRequest(BaseModel):
    """Request model for a partial event update; omitted fields are left alone."""
    title: t.Optional[str] = Field(default=None, min_length=1)
    description: t.Optional[str] = None
    date: t.Optional[str] = Field(default=None, min_length=1)
    time: t.Optional[str] = Field(default=None, min_length=1)
    attachments: t.Optional[list[str]] = None


class SearchResponse(BaseModel):
    """Response model for event search."""
    query: str
    results: list[Event] = Field(default_factory=list)


class ShowCalendarResponse(BaseModel):
    """Response model for the formatted month view."""
    formatted_calendar: str


class SnoozeResponse(BaseModel):
    """Response model for snoozing a notification."""
    scheduled: bool


class PermissionRequest(BaseModel):
    """Request model for changing the notification permission."""
    permission: PermissionState


class PermissionResponse(BaseModel):
    """Response model for the notification permission."""
    permission: PermissionState
