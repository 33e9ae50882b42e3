"""
FastAPI service for the calendar.

This service exposes one in-process calendar session (event store,
notification scheduler, search and month view) as REST API endpoints.
Notification timers run on the service's event loop, so every endpoint that
can arm a timer is declared ``async``.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status

from calendar_server.config import settings
from calendar_server.controller import CalendarController
from calendar_server.formatting import format_month_events
from calendar_server.models import EventDraft
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

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start a calendar session on startup and cancel its timers on shutdown."""
    calendar = CalendarController()
    permission = calendar.start()
    logger.info("Calendar session started, notification permission %s", permission)
    app.state.calendar = calendar
    yield
    app.state.calendar.shutdown()


app = FastAPI(
    title="Calendar Service",
    description="REST API for calendar events and event notifications",
    version="1.0.0",
    lifespan=lifespan,
)


def get_calendar(request: Request) -> CalendarController:
    return request.app.state.calendar


def _event_out(event) -> PydanticEvent:
    return PydanticEvent(**asdict(event))


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "calendar-service"}


@app.post("/events", response_model=PydanticEvent, status_code=status.HTTP_201_CREATED)
async def create_event(
        request: CreateEventRequest,
        calendar: CalendarController = Depends(get_calendar)
) -> PydanticEvent:
    """
    Create an event and schedule its notification.

    Title, date and time are required; empty values are rejected with 422.
    """
    event = calendar.create_event(EventDraft(**request.model_dump()))
    return _event_out(event)


@app.get("/events", response_model=list[PydanticEvent])
async def list_events(calendar: CalendarController = Depends(get_calendar)) -> list[PydanticEvent]:
    """List all events in creation order."""
    return [_event_out(event) for event in calendar.list_events()]


@app.get("/events/search", response_model=SearchResponse)
async def search_events(
        q: str = Query(default=""),
        calendar: CalendarController = Depends(get_calendar)
) -> SearchResponse:
    """
    Search events by title, description or date.

    An empty query returns no results.
    """
    results = calendar.search(q)
    return SearchResponse(query=q, results=[_event_out(event) for event in results])


@app.get("/events/{event_id}", response_model=PydanticEvent)
async def get_event(event_id: int, calendar: CalendarController = Depends(get_calendar)) -> PydanticEvent:
    """Fetch one event."""
    event = calendar.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Event {event_id} not found")
    return _event_out(event)


@app.patch("/events/{event_id}", response_model=PydanticEvent)
async def update_event(
        event_id: int,
        request: UpdateEventRequest,
        calendar: CalendarController = Depends(get_calendar)
) -> PydanticEvent:
    """
    Update the given fields of an event and reschedule its notification.
    """
    event = calendar.update_event(event_id, request.model_dump(exclude_none=True))
    if event is None:
        raise HTTPException(status_code=404, detail=f"Event {event_id} not found")
    return _event_out(event)


@app.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: int, calendar: CalendarController = Depends(get_calendar)) -> Response:
    """
    Delete an event and its notifications. Unknown ids are accepted silently.
    """
    calendar.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/calendar/month", response_model=PydanticMonthGrid)
async def month_grid(calendar: CalendarController = Depends(get_calendar)) -> PydanticMonthGrid:
    """Return the current month with each day's events."""
    grid = calendar.month_grid()
    return PydanticMonthGrid(title=grid.title, **asdict(grid))


@app.get("/calendar/show", response_model=ShowCalendarResponse)
async def show_calendar(calendar: CalendarController = Depends(get_calendar)) -> ShowCalendarResponse:
    """
    Show this month's events in a formatted display.
    """
    return ShowCalendarResponse(formatted_calendar=format_month_events(calendar.month_grid()))


@app.get("/notifications", response_model=list[PydanticFiredNotification])
async def list_notifications(
        calendar: CalendarController = Depends(get_calendar)
) -> list[PydanticFiredNotification]:
    """List fired notifications that have not been dismissed."""
    return [PydanticFiredNotification(**asdict(n)) for n in calendar.notifications]


@app.delete("/notifications/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_notification(
        notification_id: int,
        calendar: CalendarController = Depends(get_calendar)
) -> Response:
    """Dismiss a fired notification."""
    calendar.dismiss_notification(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/notifications/{notification_id}/snooze", response_model=SnoozeResponse)
async def snooze_notification(
        notification_id: int,
        calendar: CalendarController = Depends(get_calendar)
) -> SnoozeResponse:
    """
    Remind about a fired notification again after the snooze delay.
    """
    handle = calendar.snooze_notification(notification_id)
    return SnoozeResponse(scheduled=handle is not None)


@app.get("/notifications/permission", response_model=PermissionResponse)
async def get_permission(calendar: CalendarController = Depends(get_calendar)) -> PermissionResponse:
    """Current notification permission."""
    return PermissionResponse(permission=calendar.notifier.permission)


@app.put("/notifications/permission", response_model=PermissionResponse)
async def set_permission(
        request: PermissionRequest,
        calendar: CalendarController = Depends(get_calendar)
) -> PermissionResponse:
    """
    Grant or revoke notification permission.

    Revoking does not cancel armed timers; they fire and are dropped.
    """
    calendar.notifier.set_permission(request.permission)
    return PermissionResponse(permission=calendar.notifier.permission)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8004)
