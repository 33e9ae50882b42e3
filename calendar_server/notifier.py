"""
Notification surfaces.

A notifier is anything with ``can_notify``, ``notify`` and
``request_permission``. The scheduler only talks to that interface, so tests
can hand it a recording fake instead of a real display.
"""
from __future__ import annotations

import logging
import typing as t

from rich.console import Console
from rich.panel import Panel

from .models import NotificationPayload

logger = logging.getLogger(__name__)

PermissionState = t.Literal["default", "granted", "denied"]
PERMISSION_STATES: tuple[str, ...] = ("default", "granted", "denied")


class Notifier(t.Protocol):
    permission: str

    def can_notify(self) -> bool: ...

    def notify(self, payload: NotificationPayload) -> bool: ...

    def request_permission(self) -> str: ...

    def set_permission(self, state: str) -> None: ...


class ConsoleNotifier:
    """Shows notifications as rich panels on the terminal."""

    def __init__(
            self,
            permission: PermissionState = "default",
            auto_grant: bool = True,
            console: t.Optional[Console] = None
    ) -> None:
        self.permission: str = permission
        self.auto_grant = auto_grant
        self.console = console or Console(stderr=True)

    def can_notify(self) -> bool:
        return self.permission == "granted"

    def request_permission(self) -> str:
        """Asks for permission; the answer is decided by ``auto_grant``."""
        if self.permission == "default":
            self.permission = "granted" if self.auto_grant else "denied"
            logger.info("Notification permission %s", self.permission)
        return self.permission

    def set_permission(self, state: str) -> None:
        if state not in PERMISSION_STATES:
            raise ValueError(f"Unknown permission state: {state}")
        self.permission = state

    def notify(self, payload: NotificationPayload) -> bool:
        if not self.can_notify():
            return False
        self.console.print(
            Panel(
                payload.body or "",
                title=f"🔔 {payload.title}",
                subtitle=f"[dim]{payload.tag}[/dim]",
                border_style="cyan",
                expand=False,
            )
        )
        return True
