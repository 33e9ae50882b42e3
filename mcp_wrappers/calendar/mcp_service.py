"""
MCP wrapper for the calendar service.

This module offers the calendar tools over HTTP: each function calls the
distributed calendar service and converts the Pydantic responses back to the
calendar_server dataclasses. The same functions back the command line client.
"""
from __future__ import annotations

import typing as t
from contextlib import contextmanager

import httpx
from fastmcp import FastMCP

from calendar_server.config import settings
from calendar_server.grid import CalendarDay, MonthGrid
from calendar_server.models import Event, FiredNotification
# Import Pydantic models for HTTP serialization
from services.shared.models import (
    CreateEventRequest,
    Event as PydanticEvent,
    FiredNotification as PydanticFiredNotification,
    MonthGrid as PydanticMonthGrid,
    PermissionRequest,
    PermissionResponse,
    SearchResponse,
    ShowCalendarResponse,
    SnoozeResponse,
    UpdateEventRequest,
)


mcp = FastMCP("CalendarMCPWrapper")

# Service URL - configurable via environment variable
CALENDAR_SERVICE_URL = settings.CALENDAR_SERVICE_URL

# Timeout settings for fast operations (in seconds)
STANDARD_TIMEOUT = 30.0  # 30 seconds for standard CRUD operations


def _client() -> httpx.Client:
    return httpx.Client(timeout=STANDARD_TIMEOUT)


@contextmanager
def _service_errors(action: str) -> t.Iterator[None]:
    """Translate request building and transport failures to RuntimeError."""
    try:
        yield
    except httpx.TimeoutException:
        raise RuntimeError(f"{action} timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from calendar service: {e.response.status_code} {e.response.text}")
    except Exception as e:
        raise RuntimeError(f"Error calling calendar service: {str(e)}")


def _send(method: str, path: str, **kwargs: t.Any) -> httpx.Response:
    with _client() as client:
        response = client.request(method, f"{CALENDAR_SERVICE_URL}{path}", **kwargs)
        response.raise_for_status()
    return response


def _call(method: str, path: str, action: str, **kwargs: t.Any) -> httpx.Response:
    """Send one request to the calendar service, translating failures to RuntimeError."""
    with _service_errors(action):
        return _send(method, path, **kwargs)


def _pydantic_to_dataclass_event(event: PydanticEvent) -> Event:
    return Event(**event.model_dump())


def _events_from_json(data: list[dict]) -> list[Event]:
    return [_pydantic_to_dataclass_event(PydanticEvent(**item)) for item in data]


def _create_event(
    title: str,
    date: str,
    time: str,
    description: str = "",
    attachments: t.Optional[list[str]] = None
) -> Event:
    """
    Create an event.

    Required fields are validated before anything is sent; a blank one
    raises RuntimeError like any other service failure.
    """
    with _service_errors("Event creation"):
        request = CreateEventRequest(
            title=title,
            date=date,
            time=time,
            description=description,
            attachments=list(attachments or []),
        )
        response = _send("POST", "/events", json=request.model_dump())
    return _pydantic_to_dataclass_event(PydanticEvent(**response.json()))


def _update_event(event_id: int, **fields: t.Any) -> Event:
    """Update the given fields of an event."""
    with _service_errors("Event update"):
        request = UpdateEventRequest(**fields)
        response = _send("PATCH", f"/events/{event_id}", json=request.model_dump(exclude_none=True))
    return _pydantic_to_dataclass_event(PydanticEvent(**response.json()))


def _delete_event(event_id: int) -> None:
    _call("DELETE", f"/events/{event_id}", "Event deletion")


def _get_event(event_id: int) -> Event:
    response = _call("GET", f"/events/{event_id}", "Event lookup")
    return _pydantic_to_dataclass_event(PydanticEvent(**response.json()))


def _list_events() -> list[Event]:
    response = _call("GET", "/events", "List events")
    return _events_from_json(response.json())


def _search_events(query: str) -> list[Event]:
    response = _call("GET", "/events/search", "Event search", params={"q": query})
    result = SearchResponse(**response.json())
    return [_pydantic_to_dataclass_event(event) for event in result.results]


def _month_grid() -> MonthGrid:
    response = _call("GET", "/calendar/month", "Month view")
    grid = PydanticMonthGrid(**response.json())
    return MonthGrid(
        year=grid.year,
        month=grid.month,
        leading_blanks=grid.leading_blanks,
        days=[
            CalendarDay(
                day=day.day,
                date=day.date,
                events=[_pydantic_to_dataclass_event(event) for event in day.events],
            )
            for day in grid.days
        ],
        headers=tuple(grid.headers),
    )


def _show_calendar() -> str:
    response = _call("GET", "/calendar/show", "Show calendar")
    return ShowCalendarResponse(**response.json()).formatted_calendar


def _list_notifications() -> list[FiredNotification]:
    response = _call("GET", "/notifications", "List notifications")
    return [
        FiredNotification(**PydanticFiredNotification(**item).model_dump())
        for item in response.json()
    ]


def _dismiss_notification(notification_id: int) -> None:
    _call("DELETE", f"/notifications/{notification_id}", "Dismiss notification")


def _snooze_notification(notification_id: int) -> bool:
    response = _call("POST", f"/notifications/{notification_id}/snooze", "Snooze notification")
    return SnoozeResponse(**response.json()).scheduled


def _get_permission() -> str:
    response = _call("GET", "/notifications/permission", "Permission lookup")
    return PermissionResponse(**response.json()).permission


def _set_permission(permission: str) -> str:
    with _service_errors("Permission change"):
        request = PermissionRequest(permission=permission)
        response = _send("PUT", "/notifications/permission", json=request.model_dump())
    return PermissionResponse(**response.json()).permission


@mcp.tool()
def create_event(
    title: str,
    date: str,
    time: str,
    description: str = "",
    attachments: t.Optional[list[str]] = None
) -> Event:
    """Creates a calendar event."""
    return _create_event(title, date, time, description, attachments)


@mcp.tool()
def update_event(
    event_id: int,
    title: t.Optional[str] = None,
    description: t.Optional[str] = None,
    date: t.Optional[str] = None,
    time: t.Optional[str] = None
) -> Event:
    """Updates the given fields of a calendar event."""
    return _update_event(event_id, title=title, description=description, date=date, time=time)


@mcp.tool()
def delete_event(event_id: int) -> None:
    """Deletes a calendar event."""
    _delete_event(event_id)


@mcp.tool()
def list_events() -> list[Event]:
    """Lists all calendar events."""
    return _list_events()


@mcp.tool()
def search_events(query: str) -> list[Event]:
    """Searches calendar events by title, description or date."""
    return _search_events(query)


@mcp.tool()
def show_calendar() -> str:
    """Displays this month's events in a formatted view."""
    return _show_calendar()


@mcp.tool()
def list_notifications() -> list[FiredNotification]:
    """Lists fired notifications."""
    return _list_notifications()


@mcp.tool()
def snooze_notification(notification_id: int) -> bool:
    """Reminds about a fired notification again later."""
    return _snooze_notification(notification_id)


@mcp.tool()
def dismiss_notification(notification_id: int) -> None:
    """Dismisses a fired notification."""
    _dismiss_notification(notification_id)


if __name__ == "__main__":
    mcp.run()
