"""
Calendar helpers for monthly schedules.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date

from dateutil.relativedelta import relativedelta


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def add_months(d: date, months: int) -> date:
    """Shift by whole months; the day is clamped to the target month's length."""
    return d + relativedelta(months=months)


def clamp_day(year: int, month: int, day: int) -> date:
    """Day ``day`` of the month, or its last day when the month is shorter."""
    return date(year, month, min(day, days_in_month(year, month)))


def iter_month_starts(start: date, end: date) -> Iterator[date]:
    """First day of every month from ``start``'s month to ``end``'s, inclusive."""
    first = start_of_month(start)
    last = start_of_month(end)
    offset = 0
    cursor = first
    while cursor <= last:
        yield cursor
        offset += 1
        cursor = add_months(first, offset)
