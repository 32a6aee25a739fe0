"""
Module: cashflow_engines.kpis
Responsibility:
    Windowed sums over settled events: month totals, the trailing burn
    rate, income-vs-expense series per month and expenses per category.
    The burn rate lives here once and is shared by the dashboard and the
    reporting aggregators.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Windows are inclusive on both ends.
    - Burn rate is an independent computation; it does not reuse the
      forecast's daily buckets.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from cashflow_engines.calendar import add_months, first_of_month, iter_month_starts
from cashflow_kernel.domain.facts import SettledExpenseEvent, SettledIncomeEvent
from cashflow_kernel.logging_config import get_logger

logger = get_logger("engines.kpis")

ZERO = Decimal("0")
DEFAULT_BURN_RATE_MONTHS = 3


@dataclass(frozen=True)
class MonthlyTotals:
    """Settled income and expenses for one calendar month."""

    month: date  # first day of the month
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class CategoryTotal:
    """Settled expenses for one category."""

    category: str
    amount: Decimal


def sum_between(
    events: Iterable[SettledIncomeEvent | SettledExpenseEvent],
    start: date,
    end: date,
) -> Decimal:
    """Sum of amounts settled in ``[start, end]``."""
    return sum((e.amount for e in events if start <= e.settled_date <= end), ZERO)


def burn_rate(
    settled_expenses: Iterable[SettledExpenseEvent],
    today: date,
    months: int = DEFAULT_BURN_RATE_MONTHS,
) -> Decimal:
    """
    Average monthly spend over the trailing window.

    Sum of settled expenses in ``[today - months, today]`` divided by
    ``months``.
    """
    if months <= 0:
        return ZERO
    window_start = add_months(today, -months)
    total = sum_between(settled_expenses, window_start, today)
    rate = total / months

    logger.debug("burn_rate_calculated", extra={
        "today": today.isoformat(),
        "window_start": window_start.isoformat(),
        "months": months,
        "total": str(total),
        "burn_rate": str(rate),
    })
    return rate


def income_expenses_by_month(
    settled_income: Iterable[SettledIncomeEvent],
    settled_expenses: Iterable[SettledExpenseEvent],
    start: date,
    end: date,
) -> list[MonthlyTotals]:
    """
    One row per calendar month touched by ``[start, end]``, zero-filled.

    Events outside the range are ignored.
    """
    income: dict[date, Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for event in settled_income:
        if start <= event.settled_date <= end:
            income[first_of_month(event.settled_date)] += event.amount
    for event in settled_expenses:
        if start <= event.settled_date <= end:
            expenses[first_of_month(event.settled_date)] += event.amount

    return [
        MonthlyTotals(
            month=month,
            income=income.get(month, ZERO),
            expenses=expenses.get(month, ZERO),
        )
        for month in iter_month_starts(start, end)
    ]


def expenses_by_category(
    settled_expenses: Iterable[SettledExpenseEvent],
    start: date,
    end: date,
) -> list[CategoryTotal]:
    """Settled expenses in ``[start, end]`` per category, largest first."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for event in settled_expenses:
        if start <= event.settled_date <= end:
            totals[event.category or "other"] += event.amount
    ranked = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    return [CategoryTotal(category=c, amount=a) for c, a in ranked]
