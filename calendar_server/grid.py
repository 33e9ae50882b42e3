"""
Month grid for the calendar view.

Only the month containing "today" is ever built; there is no navigation.
"""
from __future__ import annotations

import calendar
import typing as t
from dataclasses import dataclass, field
from datetime import date

from .models import Event

WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass
class CalendarDay:
    """One cell of the month grid."""
    day: int
    date: str  # "YYYY-MM-DD"
    events: list[Event] = field(default_factory=list)


@dataclass
class MonthGrid:
    """All days of a month with the events that fall on them."""
    year: int
    month: int
    leading_blanks: int  # empty cells before day 1 in a Sunday-first week
    days: list[CalendarDay] = field(default_factory=list)
    headers: tuple[str, ...] = WEEKDAY_HEADERS

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def weeks(self) -> list[list[t.Optional[CalendarDay]]]:
        """Rows of seven cells, padded with None at both ends."""
        cells: list[t.Optional[CalendarDay]] = [None] * self.leading_blanks + list(self.days)
        cells += [None] * (-len(cells) % 7)
        return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def build_month_grid(events: t.Iterable[Event], today: date) -> MonthGrid:
    """Group ``events`` into the days of the month containing ``today``.

    Each day scans every event, which is fine for a personal calendar.
    """
    events = list(events)
    first_weekday, days_in_month = calendar.monthrange(today.year, today.month)
    # calendar counts Monday as 0; the grid starts on Sunday
    leading_blanks = (first_weekday + 1) % 7

    days = []
    for day in range(1, days_in_month + 1):
        date_string = f"{today.year}-{today.month:02d}-{day:02d}"
        days.append(CalendarDay(
            day=day,
            date=date_string,
            events=[event for event in events if event.date == date_string],
        ))
    return MonthGrid(year=today.year, month=today.month, leading_blanks=leading_blanks, days=days)
