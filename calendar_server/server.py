# -*- coding: utf-8 -*-
import logging
import typing as t

from fastmcp import FastMCP

from calendar_server.config import settings
from calendar_server.controller import CalendarController
from calendar_server.form import REQUIRED_FIELDS
from calendar_server.formatting import format_month_events, format_notifications
from calendar_server.models import Event, EventDraft, FiredNotification

logger = logging.getLogger(__name__)

mcp = FastMCP("CalendarServer")

# One in-process session; timers run on the MCP server's event loop
controller = CalendarController()


def _check_required(values: dict[str, t.Any]) -> None:
    missing = [name for name in REQUIRED_FIELDS if name in values and not values[name]]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")


def _create_event(
        title: str,
        date: str,
        time: str,
        description: str = "",
        attachments: t.Optional[list[str]] = None
) -> Event:
    _check_required({"title": title, "date": date, "time": time})
    draft = EventDraft(
        title=title,
        description=description,
        date=date,
        time=time,
        attachments=list(attachments or []),
    )
    return controller.create_event(draft)


def _update_event(
        event_id: int,
        title: t.Optional[str] = None,
        description: t.Optional[str] = None,
        date: t.Optional[str] = None,
        time: t.Optional[str] = None
) -> t.Optional[Event]:
    patch = {
        key: value
        for key, value in (("title", title), ("description", description), ("date", date), ("time", time))
        if value is not None
    }
    _check_required(patch)
    return controller.update_event(event_id, patch)


def _delete_event(event_id: int) -> bool:
    existed = controller.get_event(event_id) is not None
    controller.delete_event(event_id)
    return existed


def _search_events(query: str) -> list[Event]:
    return controller.search(query)


def _show_calendar() -> str:
    return format_month_events(controller.month_grid())


def _show_notifications() -> str:
    return format_notifications(controller.notifications)


def _dismiss_notification(notification_id: int) -> bool:
    before = len(controller.notifications)
    controller.dismiss_notification(notification_id)
    return len(controller.notifications) < before


def _snooze_notification(notification_id: int) -> bool:
    return controller.snooze_notification(notification_id) is not None


@mcp.tool()
async def create_event(
        title: str,
        date: str,
        time: str,
        description: str = "",
        attachments: t.Optional[list[str]] = None
) -> Event:
    """Creates a calendar event and schedules its notification.

    :param title: Title of the event.
    :param date: Date in YYYY-MM-DD format.
    :param time: Time of day in HH:MM format.
    :param description: Free text shown as the notification body (optional).
    :param attachments: File names to keep with the event (optional).
    :return: The created Event.
    """
    return _create_event(title, date, time, description, attachments)


@mcp.tool()
async def update_event(
        event_id: int,
        title: t.Optional[str] = None,
        description: t.Optional[str] = None,
        date: t.Optional[str] = None,
        time: t.Optional[str] = None
) -> t.Optional[Event]:
    """Updates the given fields of an event and reschedules its notification.

    :param event_id: Id of the event to update.
    :return: The updated Event, or None if no event has that id.
    """
    return _update_event(event_id, title, description, date, time)


@mcp.tool()
async def delete_event(event_id: int) -> bool:
    """Deletes an event together with its notifications.

    :param event_id: Id of the event to delete.
    :return: Whether an event with that id existed.
    """
    return _delete_event(event_id)


@mcp.tool()
async def list_events() -> list[Event]:
    """Lists all calendar events in creation order."""
    return controller.list_events()


@mcp.tool()
async def search_events(query: str) -> list[Event]:
    """Searches events by title, description or date.

    :param query: Text to look for; matching ignores case except for dates.
    :return: Matching events. An empty query returns nothing.
    """
    return _search_events(query)


@mcp.tool()
async def show_calendar() -> str:
    """Displays this month's events as a formatted table."""
    return _show_calendar()


@mcp.tool()
async def list_notifications() -> list[FiredNotification]:
    """Lists the notifications that have fired and not been dismissed."""
    return controller.notifications


@mcp.tool()
async def show_notifications() -> str:
    """Displays fired notifications as a formatted list."""
    return _show_notifications()


@mcp.tool()
async def dismiss_notification(notification_id: int) -> bool:
    """Dismisses a fired notification.

    :param notification_id: The event id the notification belongs to.
    :return: Whether anything was dismissed.
    """
    return _dismiss_notification(notification_id)


@mcp.tool()
async def snooze_notification(notification_id: int) -> bool:
    """Reminds about a fired notification again after the snooze delay.

    :param notification_id: The event id the notification belongs to.
    :return: Whether a reminder was scheduled.
    """
    return _snooze_notification(notification_id)


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    controller.start()
    mcp.run()
