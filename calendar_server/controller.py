"""
Calendar controller.

Owns one session's worth of state: the event store, the notification
scheduler, the form and the current search. Every mutation goes through the
methods here so scheduling and notification cleanup stay in step with the
store.
"""
from __future__ import annotations

import asyncio
import logging
import typing as t
from datetime import datetime, timedelta

from .config import settings
from .form import EventForm
from .grid import MonthGrid, build_month_grid
from .models import Event, EventDraft, FiredNotification
from .notifier import ConsoleNotifier, Notifier
from .scheduler import NotificationScheduler, TimerHandle
from .search import search_events
from .store import EventStore

logger = logging.getLogger(__name__)


class CalendarController:
    """Dispatches user actions to the store and the scheduler."""

    def __init__(
            self,
            notifier: t.Optional[Notifier] = None,
            *,
            store: t.Optional[EventStore] = None,
            loop: t.Optional[asyncio.AbstractEventLoop] = None,
            clock: t.Callable[[], datetime] = datetime.now,
            policy: t.Optional[str] = None,
            snooze_delay: t.Optional[timedelta] = None
    ) -> None:
        self.store = store or EventStore()
        self.notifier = notifier or ConsoleNotifier(auto_grant=settings.NOTIFY_AUTO_GRANT)
        self.clock = clock
        self.scheduler = NotificationScheduler(
            self.notifier,
            loop=loop,
            clock=clock,
            resolver=self.store.get,
            policy=policy or settings.RESCHEDULE_POLICY,
            snooze_delay=snooze_delay or timedelta(minutes=settings.SNOOZE_MINUTES),
        )
        self.form = EventForm(
            on_create=self.create_event,
            on_update=self.update_event,
            on_delete=self.delete_event,
        )
        self.search_query = ""
        self.search_results: list[Event] = []

    def start(self) -> str:
        """Check notification permission once, asking for it when not yet granted."""
        if self.notifier.permission != "granted":
            return self.notifier.request_permission()
        return self.notifier.permission

    def shutdown(self) -> None:
        self.scheduler.shutdown()

    # Event operations

    def create_event(self, draft: EventDraft) -> Event:
        event = self.store.create(draft)
        self.scheduler.schedule(event)
        self._refresh_search()
        return event

    def update_event(self, event_id: int, patch: dict[str, t.Any]) -> t.Optional[Event]:
        """Apply ``patch`` and reschedule. Returns the updated event, or None if unknown."""
        if self.store.get(event_id) is None:
            logger.debug("Update ignored, no event %s", event_id)
            return None
        self.store.update(event_id, patch)
        updated = self.store.get(event_id)
        if self.scheduler.policy == "duplicate":
            # Historical behavior: the timer is armed from the patch itself
            self.scheduler.schedule({**patch, "id": event_id})
        else:
            self.scheduler.schedule(updated)
        self._refresh_search()
        return updated

    def delete_event(self, event_id: int) -> None:
        self.store.delete(event_id)
        self.scheduler.discard(event_id)
        self._refresh_search()

    def get_event(self, event_id: int) -> t.Optional[Event]:
        return self.store.get(event_id)

    def list_events(self) -> list[Event]:
        return self.store.all_events()

    # View

    def search(self, query: str) -> list[Event]:
        self.search_query = query
        self.search_results = search_events(self.store.all_events(), query)
        return self.search_results

    def _refresh_search(self) -> None:
        if self.search_query:
            self.search_results = search_events(self.store.all_events(), self.search_query)

    def month_grid(self) -> MonthGrid:
        return build_month_grid(self.store.all_events(), self.clock().date())

    # Notifications

    @property
    def notifications(self) -> list[FiredNotification]:
        return self.scheduler.notifications

    def dismiss_notification(self, notification_id: int) -> None:
        self.scheduler.dismiss(notification_id)

    def snooze_notification(self, notification_id: int) -> t.Optional[TimerHandle]:
        return self.scheduler.snooze(notification_id)
