"""
Module: cashflow_engines.forecast
Responsibility:
    Project cash forward day by day from a base cash position by layering
    pending receivables, pending one-off payables, smoothed recurring
    contract income and monthly recurring expenses onto a running balance.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import cashflow_kernel/domain and sibling engine helpers.

Invariants enforced:
    - Purity: no clock access.  ``today`` is a parameter, captured once by
      the caller.
    - Decimal-only arithmetic; each output value is rounded half-up to
      cents, the running balance itself is never rounded.
    - Output length equals ``horizon_days``; day 0 is ``today``.
    - Contract income is smoothed: monthly equivalent / 30 on every day of
      the horizon, independent of calendar month length.
    - Recurring expenses are discrete: the full amount lands on each
      monthly occurrence of the anchor day.

Failure modes:
    - InvalidHorizonError when ``horizon_days`` is negative or not an int.

Usage:
    from cashflow_engines.forecast import CashflowForecaster

    forecaster = CashflowForecaster()
    series = forecaster.project(facts=facts, today=date(2024, 3, 1), horizon_days=90)
    series[0].projected_cash  # base cash plus anything landing today
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from cashflow_engines.calendar import add_months, iter_days, months_between
from cashflow_engines.tracer import traced_engine
from cashflow_kernel.domain.facts import (
    CashflowFacts,
    PendingExpense,
    PendingInvoice,
    RecurringContract,
    RecurringExpense,
    SettledExpenseEvent,
    SettledIncomeEvent,
)
from cashflow_kernel.exceptions import InvalidHorizonError
from cashflow_kernel.logging_config import get_logger

logger = get_logger("engines.forecast")

# Contracts are amortised over a fixed 30-day month.
CONTRACT_DAYS_PER_MONTH = Decimal("30")
CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ForecastDay:
    """One point of the projected cash series."""

    date: date
    projected_cash: Decimal

    def to_dict(self) -> dict[str, str]:
        return {"date": self.date.isoformat(), "projected_cash": str(self.projected_cash)}


def value_at(series: Sequence[ForecastDay], index: int) -> Decimal | None:
    """
    Projected cash at ``index``, or at the last day if the series is shorter.

    Returns None for an empty series.
    """
    if not series:
        return None
    return series[min(index, len(series) - 1)].projected_cash


class CashflowForecaster:
    """
    Daily cash projection over a rolling horizon.

    Contract:
        Pure functions -- no I/O, no database access.
        All facts and the reference date are passed as parameters.
    Guarantees:
        - ``project`` is deterministic for identical inputs.
        - With no obligations the series is flat at base cash.
    Non-goals:
        - No currency conversion; all amounts share one currency.
        - Amounts are not clamped; negative upstream values pass through.
    """

    def base_cash(
        self,
        settled_income: Iterable[SettledIncomeEvent],
        settled_expenses: Iterable[SettledExpenseEvent],
        today: date,
        starting_cash: Decimal | None,
    ) -> Decimal:
        """
        Starting cash (0 if unset) plus the net of settled events up to today.
        """
        income = sum((e.amount for e in settled_income if e.settled_date <= today), ZERO)
        expenses = sum((e.amount for e in settled_expenses if e.settled_date <= today), ZERO)
        base = (starting_cash if starting_cash is not None else ZERO) + income - expenses

        logger.debug("base_cash_calculated", extra={
            "today": today.isoformat(),
            "starting_cash": str(starting_cash) if starting_cash is not None else None,
            "settled_income": str(income),
            "settled_expenses": str(expenses),
            "base_cash": str(base),
        })
        return base

    @staticmethod
    def collection_date(due_date: date, today: date) -> date:
        """Overdue amounts land on today rather than in the past."""
        return max(due_date, today)

    @staticmethod
    def contract_daily_rate(contract: RecurringContract) -> Decimal:
        """Monthly-equivalent amount spread over a 30-day month."""
        return contract.monthly_amount / CONTRACT_DAYS_PER_MONTH

    def recurring_occurrences(
        self,
        expense: RecurringExpense,
        today: date,
        horizon_days: int,
    ) -> list[date]:
        """
        Monthly occurrences of ``expense`` inside ``[today, today + horizon)``.

        Every recurring expense steps by one calendar month from its anchor
        (or from today when it has none), whatever its recurrence label.
        """
        anchor = expense.anchor_due_date or today
        end = today + timedelta(days=horizon_days)

        # Jump close to today instead of walking from a distant anchor.
        step = max(0, months_between(anchor, today) - 1)
        occurrences: list[date] = []
        while True:
            occurrence = add_months(anchor, step)
            if occurrence >= end:
                break
            if occurrence >= today:
                occurrences.append(occurrence)
            step += 1
        return occurrences

    def daily_income(
        self,
        pending_invoices: Iterable[PendingInvoice],
        contracts: Iterable[RecurringContract],
        today: date,
        horizon_days: int,
    ) -> dict[date, Decimal]:
        """Expected inflow per day from pending invoices and contract run-rate."""
        income: dict[date, Decimal] = defaultdict(lambda: ZERO)

        for invoice in pending_invoices:
            income[self.collection_date(invoice.due_date, today)] += invoice.amount

        for contract in contracts:
            rate = self.contract_daily_rate(contract)
            for day in iter_days(today, horizon_days):
                income[day] += rate

        return income

    def daily_expense(
        self,
        pending_expenses: Iterable[PendingExpense],
        recurring_expenses: Iterable[RecurringExpense],
        today: date,
        horizon_days: int,
    ) -> dict[date, Decimal]:
        """Expected outflow per day from pending and recurring expenses."""
        expense: dict[date, Decimal] = defaultdict(lambda: ZERO)

        for item in pending_expenses:
            expense[self.collection_date(item.due_date, today)] += item.amount

        for item in recurring_expenses:
            for day in self.recurring_occurrences(item, today, horizon_days):
                expense[day] += item.amount

        return expense

    @traced_engine(
        "cashflow_forecast", "1.0",
        fingerprint_fields=("facts", "today", "horizon_days"),
    )
    def project(
        self,
        *,
        facts: CashflowFacts,
        today: date,
        horizon_days: int,
    ) -> list[ForecastDay]:
        """
        Project cash for ``horizon_days`` days starting at ``today``.

        Preconditions:
            - ``horizon_days`` is a non-negative int.
        Postconditions:
            - ``len(result) == horizon_days``; ``result[i].date == today + i``.
        Raises:
            InvalidHorizonError: on a negative or non-integer horizon.
        """
        if isinstance(horizon_days, bool) or not isinstance(horizon_days, int) or horizon_days < 0:
            raise InvalidHorizonError(horizon_days)

        balance = self.base_cash(
            facts.settled_income, facts.settled_expenses, today, facts.starting_cash,
        )
        income = self.daily_income(
            facts.pending_invoices, facts.contracts, today, horizon_days,
        )
        expense = self.daily_expense(
            facts.pending_expenses, facts.recurring_expenses, today, horizon_days,
        )

        series: list[ForecastDay] = []
        for day in iter_days(today, horizon_days):
            balance += income.get(day, ZERO) - expense.get(day, ZERO)
            series.append(ForecastDay(date=day, projected_cash=round_cents(balance)))

        logger.info("cashflow_projected", extra={
            "today": today.isoformat(),
            "horizon_days": horizon_days,
            "pending_invoice_count": len(facts.pending_invoices),
            "pending_expense_count": len(facts.pending_expenses),
            "contract_count": len(facts.contracts),
            "recurring_expense_count": len(facts.recurring_expenses),
            "ending_cash": str(series[-1].projected_cash) if series else None,
        })
        return series
