# -*- coding: utf-8 -*-
"""Command line client for the calendar service."""
import typing as t
from datetime import date as date_cls

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from calendar_server.form import EventForm
from calendar_server.formatting import format_event_datetime
from calendar_server.grid import MonthGrid
from calendar_server.models import Event, EventDraft
from mcp_wrappers.calendar import mcp_service as calendar_api

console = Console()
err_console = Console(stderr=True)

FIELD_PROMPTS = {"title": "Title", "date": "Date (YYYY-MM-DD)", "time": "Time (HH:MM)"}


def truncate_title(title: str, max_length: int = 45) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def fail(message: str) -> t.NoReturn:
    err_console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


def create_events_table(events: list[Event], title: str) -> Table:
    """Create a table listing events."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="white")
    table.add_column("When", style="yellow")
    table.add_column("Description", style="cyan")
    table.add_column("📎", justify="right")

    for event in events:
        table.add_row(
            str(event.id),
            truncate_title(event.title),
            format_event_datetime(event.date, event.time),
            truncate_title(event.description or "—", 30),
            str(len(event.attachments)) if event.attachments else "",
        )
    return table


def create_month_table(grid: MonthGrid) -> Table:
    """Lay the month out as a Sunday-first week grid."""
    table = Table(title=f"📅 {grid.title}", show_header=True, header_style="bold magenta", show_lines=True)
    for header in grid.headers:
        table.add_column(header, width=12, vertical="top")

    for week in grid.weeks():
        cells = []
        for day in week:
            if day is None:
                cells.append("")
                continue
            cell = Text(str(day.day), style="bold")
            for event in day.events:
                cell.append(f"\n{event.time} {truncate_title(event.title, 10)}", style="blue")
            cells.append(cell)
        table.add_row(*cells)
    return table


def fill_form(form: EventForm, values: dict[str, t.Optional[str]], attachments: tuple[str, ...]) -> None:
    """Copy given options into the draft, prompting for required fields still empty."""
    for name, value in values.items():
        if value is not None:
            form.set_field(name, value)
    for handle in attachments:
        form.add_attachment(handle)
    for name in form.missing_fields():
        form.set_field(name, click.prompt(FIELD_PROMPTS[name], default="", show_default=False))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def main() -> None:
    """Manage calendar events and notifications through the calendar service."""


@main.command()
@click.option("--title", "-t", help="Event title.")
@click.option("--date", "-d", "date_", help="Event date (YYYY-MM-DD). Defaults to today.")
@click.option("--time", "time_", help="Event time (HH:MM).")
@click.option("--description", default="", help="Event description.")
@click.option("--attach", "attachments", multiple=True, help="Attachment file name (repeatable).")
def add(title: t.Optional[str], date_: t.Optional[str], time_: t.Optional[str], description: str,
        attachments: tuple[str, ...]) -> None:
    """Create an event."""
    created: list[Event] = []

    def on_create(draft: EventDraft) -> None:
        created.append(calendar_api._create_event(
            title=draft.title,
            date=draft.date,
            time=draft.time,
            description=draft.description,
            attachments=draft.attachments,
        ))

    form = EventForm(on_create=on_create, on_update=lambda *_: None, on_delete=lambda *_: None)
    form.open_for_date(date_ or date_cls.today().isoformat())
    fill_form(form, {"title": title, "time": time_, "description": description}, attachments)

    try:
        submitted = form.submit()
    except RuntimeError as e:
        fail(str(e))
    if not submitted:
        fail(f"Missing required fields: {', '.join(form.missing_fields())}")

    event = created[0]
    console.print(f"[bold green]✓ Created[/bold green] {event.title} (id {event.id}) "
                  f"on {format_event_datetime(event.date, event.time)}")


@main.command()
@click.argument("event_id", type=int)
@click.option("--title", "-t", help="New title.")
@click.option("--date", "-d", "date_", help="New date (YYYY-MM-DD).")
@click.option("--time", "time_", help="New time (HH:MM).")
@click.option("--description", help="New description.")
@click.option("--attach", "attachments", multiple=True, help="Add an attachment file name (repeatable).")
def edit(event_id: int, title: t.Optional[str], date_: t.Optional[str], time_: t.Optional[str],
         description: t.Optional[str], attachments: tuple[str, ...]) -> None:
    """Edit an event."""
    updated: list[Event] = []

    def on_update(target_id: int, patch: dict[str, t.Any]) -> None:
        updated.append(calendar_api._update_event(target_id, **patch))

    try:
        event = calendar_api._get_event(event_id)
    except RuntimeError as e:
        fail(str(e))

    form = EventForm(on_create=lambda *_: None, on_update=on_update, on_delete=lambda *_: None)
    form.open_for_edit(event)
    fill_form(form, {"title": title, "date": date_, "time": time_, "description": description}, attachments)

    try:
        submitted = form.submit()
    except RuntimeError as e:
        fail(str(e))
    if not submitted:
        fail(f"Missing required fields: {', '.join(form.missing_fields())}")

    console.print(f"[bold green]✓ Updated[/bold green] {updated[0].title} (id {event_id})")


@main.command()
@click.argument("event_id", type=int)
def delete(event_id: int) -> None:
    """Delete an event and its notifications."""
    try:
        calendar_api._delete_event(event_id)
    except RuntimeError as e:
        fail(str(e))
    console.print(f"[bold green]✓ Deleted[/bold green] event {event_id}")


@main.command("list")
def list_command() -> None:
    """List all events."""
    try:
        events = calendar_api._list_events()
    except RuntimeError as e:
        fail(str(e))
    if not events:
        console.print("📅 No calendar events found.")
        return
    console.print(create_events_table(events, "📅 Events"))


@main.command()
@click.argument("query")
def search(query: str) -> None:
    """Search events by title, description or date."""
    try:
        results = calendar_api._search_events(query)
    except RuntimeError as e:
        fail(str(e))
    if not results:
        console.print("No events found")
        return
    console.print(create_events_table(results, "🔍 Search Results"))


@main.command()
@click.option("--text", "as_text", is_flag=True, help="Print the service's plain-text table instead of a grid.")
def show(as_text: bool) -> None:
    """Show the current month."""
    try:
        if as_text:
            console.print(calendar_api._show_calendar())
            return
        grid = calendar_api._month_grid()
    except RuntimeError as e:
        fail(str(e))
    console.print(create_month_table(grid))


@main.command()
def notifications() -> None:
    """List fired notifications."""
    try:
        fired = calendar_api._list_notifications()
    except RuntimeError as e:
        fail(str(e))
    if not fired:
        console.print("🔔 No notifications.")
        return
    for notification in fired:
        console.print(Panel(
            f"Scheduled for {notification.time.strftime('%Y-%m-%d %H:%M:%S')}",
            title=f"🔔 {notification.title}",
            subtitle=f"[dim]{notification.id}[/dim]",
            expand=False,
        ))


@main.command()
@click.argument("notification_id", type=int)
def dismiss(notification_id: int) -> None:
    """Dismiss a fired notification."""
    try:
        calendar_api._dismiss_notification(notification_id)
    except RuntimeError as e:
        fail(str(e))
    console.print(f"Dismissed notification {notification_id}")


@main.command()
@click.argument("notification_id", type=int)
def snooze(notification_id: int) -> None:
    """Remind about a fired notification again later."""
    try:
        scheduled = calendar_api._snooze_notification(notification_id)
    except RuntimeError as e:
        fail(str(e))
    if scheduled:
        console.print(f"⏰ Snoozed notification {notification_id}")
    else:
        console.print(f"[yellow]No notification {notification_id} to snooze[/yellow]")


@main.command()
@click.argument("state", required=False, type=click.Choice(["default", "granted", "denied"]))
def permission(state: t.Optional[str]) -> None:
    """Show or change the notification permission."""
    try:
        current = calendar_api._set_permission(state) if state else calendar_api._get_permission()
    except RuntimeError as e:
        fail(str(e))
    console.print(f"Notification permission: [bold]{current}[/bold]")


if __name__ == "__main__":
    main()
