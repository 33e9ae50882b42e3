"""Shared fixtures: a controllable clock and event loop, and a recording notifier."""
from __future__ import annotations

import typing as t
from datetime import datetime, timedelta

import pytest

from calendar_server.controller import CalendarController
from calendar_server.models import NotificationPayload


class FakeHandle:
    """Stands in for asyncio.TimerHandle."""

    def __init__(self, loop: "FakeLoop", when: float, callback: t.Callable, args: tuple) -> None:
        self.loop = loop
        self.when = when
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class FakeLoop:
    """Event loop double whose clock only moves when the test advances it."""

    def __init__(self, start: datetime) -> None:
        self.start = start
        self.elapsed = 0.0
        self.handles: list[FakeHandle] = []

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.elapsed)

    def call_later(self, delay: float, callback: t.Callable, *args: t.Any) -> FakeHandle:
        handle = FakeHandle(self, self.elapsed + delay, callback, args)
        self.handles.append(handle)
        return handle

    def armed(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled()]

    def advance(self, seconds: float) -> None:
        """Move time forward, running due callbacks in fire-time order."""
        target = self.elapsed + seconds
        while True:
            due = sorted(
                (h for h in self.handles if not h.cancelled() and h.when <= target),
                key=lambda h: h.when,
            )
            if not due:
                break
            handle = due[0]
            self.elapsed = handle.when
            handle.cancel()  # one-shot
            handle.callback(*handle.args)
        self.elapsed = target


class RecordingNotifier:
    """Notifier that remembers what it was asked to show."""

    def __init__(self, permission: str = "granted", grant_on_request: bool = True) -> None:
        self.permission = permission
        self.grant_on_request = grant_on_request
        self.shown: list[NotificationPayload] = []
        self.requests = 0

    def can_notify(self) -> bool:
        return self.permission == "granted"

    def notify(self, payload: NotificationPayload) -> bool:
        self.shown.append(payload)
        return True

    def request_permission(self) -> str:
        self.requests += 1
        self.permission = "granted" if self.grant_on_request else "denied"
        return self.permission

    def set_permission(self, state: str) -> None:
        if state not in ("default", "granted", "denied"):
            raise ValueError(f"Unknown permission state: {state}")
        self.permission = state


@pytest.fixture
def loop() -> FakeLoop:
    return FakeLoop(datetime(2024, 1, 10, 8, 0, 0))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_controller(loop: FakeLoop, notifier: RecordingNotifier):
    """Build a controller driven by the fake loop and clock."""
    def _make(policy: str = "cancel", **kwargs: t.Any) -> CalendarController:
        return CalendarController(
            notifier=notifier,
            loop=loop,
            clock=loop.now,
            policy=policy,
            **kwargs,
        )
    return _make


@pytest.fixture
def controller(make_controller) -> CalendarController:
    return make_controller()
