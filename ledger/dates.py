"""Calendar-date helpers and reporting windows.

Dates are plain ``datetime.date`` values (year/month/day). Nothing here
touches timezones, so a stored day never drifts by one when displayed.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from dateutil.relativedelta import relativedelta

from .errors import InvalidDateFormat

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")

MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_calendar_date(value: str) -> date:
    """Parse a YYYY-MM-DD string into a date without any UTC conversion."""
    if isinstance(value, date):
        return value
    match = _DATE_RE.match(value) if isinstance(value, str) else None
    if not match:
        raise InvalidDateFormat(value)
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidDateFormat(value) from None


def format_calendar_date(d: date) -> str:
    """Format a date as zero-padded YYYY-MM-DD."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_month(value: str) -> Tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    match = _MONTH_RE.match(value or "")
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise InvalidDateFormat(value)
    return int(match.group(1)), int(match.group(2))


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def month_label(year: int, month: int) -> str:
    """Short chart label, e.g. 'Mar/25'."""
    return f"{MONTH_ABBR[month - 1]}/{year % 100:02d}"


def months_ending(today: date, count: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the `count` months ending at today's month, oldest first."""
    first = month_start(today) - relativedelta(months=count - 1)
    months = []
    for offset in range(count):
        d = first + relativedelta(months=offset)
        months.append((d.year, d.month))
    return months


@dataclass(frozen=True)
class ReportWindow:
    """Inclusive range of calendar days a summary covers."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(
                f"Window end {format_calendar_date(self.end)} is before "
                f"start {format_calendar_date(self.start)}"
            )

    @classmethod
    def for_month(cls, year: int, month: int) -> "ReportWindow":
        first = date(year, month, 1)
        return cls(first, month_end(first))

    @classmethod
    def from_strings(cls, start: str, end: str) -> "ReportWindow":
        return cls(parse_calendar_date(start), parse_calendar_date(end))

    @property
    def is_whole_month(self) -> bool:
        return (
            self.start.day == 1
            and self.end == month_end(self.start)
        )

    @property
    def label(self) -> str:
        if self.is_whole_month:
            return f"{calendar.month_name[self.start.month]} {self.start.year}"
        return f"{format_calendar_date(self.start)} to {format_calendar_date(self.end)}"

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def previous(self) -> "ReportWindow":
        """
        The comparison window one calendar month earlier.

        A whole month steps to the whole previous month (so April 1-30
        becomes March 1-31). Any other range has both ends shifted back one
        month.
        """
        if self.is_whole_month:
            prev = self.start - relativedelta(months=1)
            return ReportWindow.for_month(prev.year, prev.month)
        return ReportWindow(
            self.start - relativedelta(months=1),
            self.end - relativedelta(months=1),
        )
