"""
Module: cashflow_engines.calendar
Responsibility:
    Calendar arithmetic shared by the engines: month stepping, month
    boundaries and day ranges.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Month stepping is anchored: ``add_months(d, n)`` always counts from
      ``d`` so a day-of-month lost to a short month (31st -> Feb 28th) is
      restored in the following long month.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


def add_months(day: date, months: int) -> date:
    """``day`` shifted by whole calendar months, clamped to month end."""
    return day + relativedelta(months=months)


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def last_of_month(day: date) -> date:
    return first_of_month(day) + relativedelta(months=1, days=-1)


def month_range(today: date, offset: int = 0) -> tuple[date, date]:
    """
    Inclusive ``(first, last)`` day of the month ``offset`` months from ``today``.

    ``month_range(date(2024, 3, 10), -1)`` is ``(2024-02-01, 2024-02-29)``.
    """
    first = add_months(first_of_month(today), offset)
    return first, last_of_month(first)


def months_between(start: date, end: date) -> int:
    """Whole calendar-month index difference (ignores day-of-month)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def iter_days(start: date, count: int) -> Iterator[date]:
    """``count`` consecutive days beginning at ``start``."""
    for offset in range(count):
        yield start + timedelta(days=offset)


def iter_month_starts(start: date, end: date) -> Iterator[date]:
    """First day of every month touched by ``[start, end]``."""
    current = first_of_month(start)
    while current <= end:
        yield current
        current = add_months(current, 1)
