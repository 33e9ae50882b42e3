"""Notification scheduling for calendar events.

Each scheduled event gets one one-shot timer on the asyncio event loop. When
the timer fires the notifier is asked again whether it may notify; if so the
notification is shown and a FiredNotification is appended to
``notifications``.

Two reschedule policies are supported:

- ``cancel``: timers are kept by event id. Scheduling an id again, or
  discarding it, cancels the armed timer. The event is looked up through
  ``resolver`` at fire time, so the notification carries current data and a
  deleted event never notifies.
- ``duplicate``: timers are fire-and-forget and carry the snapshot taken at
  schedule time. Editing an event leaves the old timer armed, which yields
  one notification per schedule call.
"""
from __future__ import annotations

import asyncio
import logging
import typing as t
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta

from .models import Event, FiredNotification, NotificationPayload
from .notifier import Notifier

logger = logging.getLogger(__name__)

RESCHEDULE_POLICIES = ("cancel", "duplicate")
SNOOZE_BODY = "This is your snoozed reminder"
DEFAULT_SNOOZE_DELAY = timedelta(minutes=5)


class TimerHandle(t.Protocol):
    def cancel(self) -> None: ...


@dataclass
class EventSnapshot:
    """Field values captured when a notification is scheduled."""
    id: int
    title: str = ""
    description: str = ""
    date: str = ""
    time: str = ""

    @classmethod
    def of(cls, event: t.Union[Event, dict[str, t.Any]]) -> "EventSnapshot":
        data = event if isinstance(event, dict) else asdict(event)
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            description=data.get("description") or "",
            date=data.get("date") or "",
            time=data.get("time") or "",
        )


def event_datetime(date: str, time: str) -> t.Optional[datetime]:
    """Combine ``YYYY-MM-DD`` and ``HH:MM`` into a local naive datetime, or None if unparsable.

    A time carrying a UTC offset (``09:00Z``) is converted to local time.
    """
    try:
        moment = datetime.fromisoformat(f"{date}T{time}")
    except (TypeError, ValueError):
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


@dataclass
class _Armed:
    handle: TimerHandle
    fire_at: datetime
    snapshot: EventSnapshot = field(repr=False)


class NotificationScheduler:
    """Arms one-shot notification timers and records the ones that fire."""

    def __init__(
            self,
            notifier: Notifier,
            *,
            loop: t.Optional[asyncio.AbstractEventLoop] = None,
            clock: t.Callable[[], datetime] = datetime.now,
            resolver: t.Optional[t.Callable[[int], t.Optional[Event]]] = None,
            policy: str = "cancel",
            snooze_delay: timedelta = DEFAULT_SNOOZE_DELAY
    ) -> None:
        if policy not in RESCHEDULE_POLICIES:
            raise ValueError(
                f"Unknown reschedule policy: {policy}. "
                f"Expected one of {list(RESCHEDULE_POLICIES)}"
            )
        self.notifier = notifier
        self.clock = clock
        self.resolver = resolver
        self.policy = policy
        self.snooze_delay = snooze_delay
        self.notifications: list[FiredNotification] = []
        self._loop = loop
        # Keyed by str(event id) or "snoozed-<id>"; only consulted under "cancel"
        self._armed: dict[str, _Armed] = {}
        # Handles not yet fired or cancelled, so shutdown can cancel fire-and-forget timers too
        self._handles: dict[int, TimerHandle] = {}

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def _arm(self, key: str, delay: float, callback: t.Callable[..., None], *args: t.Any) -> TimerHandle:
        if self.policy == "cancel":
            self.cancel(key)
        def run() -> None:
            self._handles.pop(id(handle), None)
            callback(*args)

        handle = self.loop.call_later(delay, run)
        self._handles[id(handle)] = handle
        return handle

    def schedule(self, event: t.Union[Event, dict[str, t.Any]]) -> t.Optional[TimerHandle]:
        """Arm a notification for the event's date and time.

        :param event: The event, or under the duplicate policy the update
            patch it was edited with. Must carry an ``id``.
        :return: The timer handle, or None when nothing was armed.
        """
        snapshot = EventSnapshot.of(event)
        key = str(snapshot.id)
        fire_at = event_datetime(snapshot.date, snapshot.time)

        if fire_at is None:
            logger.warning(
                "Not scheduling event %s: unparsable date/time %r %r",
                snapshot.id, snapshot.date, snapshot.time
            )
            if self.policy == "cancel":
                self.cancel(key)
            return None

        delay = (fire_at - self.clock()).total_seconds()
        if delay <= 0:
            logger.debug("Not scheduling event %s: %s is not in the future", snapshot.id, fire_at)
            if self.policy == "cancel":
                self.cancel(key)
            return None

        handle = self._arm(key, delay, self._fire, snapshot)
        if self.policy == "cancel":
            self._armed[key] = _Armed(handle=handle, fire_at=fire_at, snapshot=snapshot)
        logger.debug("Armed notification for event %s in %.1fs", snapshot.id, delay)
        return handle

    def _fire(self, snapshot: EventSnapshot) -> None:
        key = str(snapshot.id)
        if self.policy == "cancel":
            self._armed.pop(key, None)
            if self.resolver is not None:
                current = self.resolver(snapshot.id)
                if current is None:
                    logger.debug("Dropping notification for deleted event %s", snapshot.id)
                    return
                snapshot = EventSnapshot.of(current)

        if not self.notifier.can_notify():
            logger.debug("Dropping notification for event %s: permission not granted", snapshot.id)
            return

        self.notifier.notify(NotificationPayload(
            title=snapshot.title,
            body=snapshot.description,
            tag=key,
        ))
        self.notifications.append(FiredNotification(
            id=snapshot.id,
            title=snapshot.title,
            time=self.clock(),
        ))
        logger.info("Notified event %s (%s)", snapshot.id, snapshot.title)

    def snooze(self, notification_id: int) -> t.Optional[TimerHandle]:
        """Re-remind about a fired notification after the snooze delay.

        The fired record is left as it is and the reminder adds no record.
        """
        fired = next((n for n in self.notifications if n.id == notification_id), None)
        if fired is None:
            logger.debug("Snooze ignored, no notification %s", notification_id)
            return None

        key = f"snoozed-{fired.id}"
        payload = NotificationPayload(title=f"Reminder: {fired.title}", body=SNOOZE_BODY, tag=key)
        delay = self.snooze_delay.total_seconds()
        handle = self._arm(key, delay, self._fire_snooze, payload)
        if self.policy == "cancel":
            self._armed[key] = _Armed(
                handle=handle,
                fire_at=self.clock() + self.snooze_delay,
                snapshot=EventSnapshot(id=fired.id, title=fired.title),
            )
        return handle

    def _fire_snooze(self, payload: NotificationPayload) -> None:
        self._armed.pop(payload.tag, None)
        if not self.notifier.can_notify():
            logger.debug("Dropping snoozed reminder %s: permission not granted", payload.tag)
            return
        self.notifier.notify(payload)

    def cancel(self, key: t.Union[int, str]) -> bool:
        """Cancel the armed timer stored under ``key``. Returns whether one existed."""
        armed = self._armed.pop(str(key), None)
        if armed is None:
            return False
        armed.handle.cancel()
        self._handles.pop(id(armed.handle), None)
        return True

    def dismiss(self, notification_id: int) -> None:
        """Remove every fired record with this id."""
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    def discard(self, event_id: int) -> None:
        """Forget an event: drop its fired records and, under "cancel", its timers."""
        self.dismiss(event_id)
        if self.policy == "cancel":
            self.cancel(event_id)
            self.cancel(f"snoozed-{event_id}")

    def pending(self) -> dict[str, datetime]:
        """Fire times of the timers still armed, by key. Empty under "duplicate"."""
        return {key: armed.fire_at for key, armed in self._armed.items()}

    def shutdown(self) -> None:
        """Cancel every timer this scheduler has armed."""
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        self._armed.clear()
