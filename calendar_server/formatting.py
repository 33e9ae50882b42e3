# -*- coding: utf-8 -*-
"""Plain-text views of the calendar, shared by the MCP tools and the REST service."""
from __future__ import annotations

from datetime import datetime

from .grid import MonthGrid
from .models import Event, FiredNotification


def format_event_datetime(date: str, time: str) -> str:
    """Formats an event's date and time as 'Mon 1/15 2:30 PM'.

    If parsing fails, returns the raw values joined by a space.
    """
    try:
        dt = datetime.fromisoformat(f"{date}T{time}")
        return dt.strftime("%a %-m/%-d %-I:%M %p")
    except (ValueError, TypeError):
        return f"{date} {time}".strip()


def format_month_events(grid: MonthGrid) -> str:
    """Formats the events of a month grid as a clean table, day by day."""
    events: list[Event] = [event for day in grid.days for event in day.events]
    if not events:
        return f"📅 No events in {grid.title}."

    lines = []
    lines.append(f"📅 {grid.title.upper()}")
    lines.append("=" * 100)
    lines.append(f"{'ID':<15} {'Title':<35} {'When':<18} {'Description':<30}")
    lines.append("-" * 100)

    for event in events:
        title = event.title[:34] if len(event.title) > 34 else event.title
        description = event.description[:29] if event.description and len(event.description) > 29 else (event.description or "—")
        lines.append(
            f"{event.id:<15} {title:<35} {format_event_datetime(event.date, event.time):<18} {description:<30}"
        )

    lines.append("=" * 100)
    lines.append(f"Total: {len(events)} event(s)")
    return "\n".join(lines)


def format_notifications(notifications: list[FiredNotification]) -> str:
    """Formats fired notifications, most recent last."""
    if not notifications:
        return "🔔 No notifications."

    lines = ["🔔 NOTIFICATIONS", "=" * 60]
    for notification in notifications:
        lines.append(
            f"{notification.id:<15} {notification.title[:30]:<30} "
            f"{notification.time.strftime('%Y-%m-%d %H:%M:%S')}"
        )
    lines.append("=" * 60)
    return "\n".join(lines)
