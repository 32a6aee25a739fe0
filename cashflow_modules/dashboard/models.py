"""
Dashboard Domain Models (``cashflow_modules.dashboard.models``).

Responsibility
--------------
Frozen value objects returned by ``DashboardService``.  The forecast
series, aging summary and chart rows are engine types re-exported here so
callers import every dashboard result from one place.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
"""

from dataclasses import dataclass
from decimal import Decimal

from cashflow_engines.aging import AgingSummary
from cashflow_engines.forecast import ForecastDay
from cashflow_engines.kpis import CategoryTotal, MonthlyTotals


def _fmt(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True)
class DashboardKpis:
    """
    Headline figures for the finance dashboard.

    ``cash_position`` and ``forecast_next_30_days`` are None when no
    starting cash is configured: without a baseline there is no absolute
    cash figure to report.
    """

    income_this_month: Decimal
    expenses_this_month: Decimal
    net_result_this_month: Decimal
    cash_position: Decimal | None
    forecast_next_30_days: Decimal | None
    burn_rate_last_3_months: Decimal
    income_prev_month: Decimal
    expenses_prev_month: Decimal

    def to_dict(self) -> dict[str, str | None]:
        return {name: _fmt(value) for name, value in vars(self).items()}


__all__ = [
    "AgingSummary",
    "CategoryTotal",
    "DashboardKpis",
    "ForecastDay",
    "MonthlyTotals",
]
