"""
Financial Reporting Domain Models (``cashflow_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for the financial reporting tab: the
requested date range, the range KPIs and the chart bundle.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* A ``ReportingDateRange`` never ends before it starts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from cashflow_engines.forecast import ForecastDay
from cashflow_engines.kpis import CategoryTotal, MonthlyTotals


@dataclass(frozen=True)
class ReportingDateRange:
    """Inclusive ``[start, end]`` reporting window."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must not precede start ({self.start})")

    @classmethod
    def from_iso(cls, start: str, end: str) -> ReportingDateRange:
        return cls(start=date.fromisoformat(start), end=date.fromisoformat(end))


@dataclass(frozen=True)
class FinancialKpis:
    """Range totals plus point-in-time liquidity figures."""

    income_in_range: Decimal
    expenses_in_range: Decimal
    net_result: Decimal
    pending_invoices_sum: Decimal
    pending_invoices_count: int
    burn_rate: Decimal
    forecast_60: Decimal

    @classmethod
    def empty(cls) -> FinancialKpis:
        zero = Decimal("0")
        return cls(zero, zero, zero, zero, 0, zero, zero)

    def to_dict(self) -> dict[str, str | int]:
        return {
            "income_in_range": str(self.income_in_range),
            "expenses_in_range": str(self.expenses_in_range),
            "net_result": str(self.net_result),
            "pending_invoices_sum": str(self.pending_invoices_sum),
            "pending_invoices_count": self.pending_invoices_count,
            "burn_rate": str(self.burn_rate),
            "forecast_60": str(self.forecast_60),
        }


@dataclass(frozen=True)
class FinancialCharts:
    """Chart series for the financial reporting tab."""

    income_expenses_by_month: tuple[MonthlyTotals, ...]
    expenses_by_category: tuple[CategoryTotal, ...]
    forecast: tuple[ForecastDay, ...]
