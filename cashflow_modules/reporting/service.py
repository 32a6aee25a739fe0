"""
Reporting Module Service (``cashflow_modules.reporting.service``).

Responsibility
--------------
Financial KPIs and charts over a caller-chosen date range.  Range sums
come from the ledger selector, the burn rate from
``cashflow_engines.kpis.burn_rate`` and the forecast from
``DashboardService``, so each figure is computed in exactly one place.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config``.

Invariants enforced
-------------------
* Read-only -- no mutations.
* Today is read once per entry point and shared with the forecast.
* The burn rate window is relative to today, not to the reporting range.

Failure modes
-------------
* Upstream read failure  -> zero totals and a forecast flat at zero
  (``forecast_60`` is then 0.00).
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from cashflow_config import get_active_config
from cashflow_config.schema import CashflowConfig
from cashflow_engines.calendar import add_months
from cashflow_engines.forecast import round_cents, value_at
from cashflow_engines.kpis import burn_rate, sum_between
from cashflow_kernel.domain.clock import Clock, SystemClock
from cashflow_kernel.logging_config import get_logger, operation_context
from cashflow_kernel.selectors.ledger_selector import LedgerSelector
from cashflow_kernel.selectors.obligation_selector import ObligationSelector

from cashflow_modules.dashboard.service import DashboardService
from cashflow_modules.reporting.models import (
    FinancialCharts,
    FinancialKpis,
    ReportingDateRange,
)

logger = get_logger("modules.reporting.service")


class ReportingService:
    """
    Financial reporting over a date range.

    Contract
    --------
    * Every public method returns a frozen DTO.
    * All methods are read-only.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: CashflowConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._ledger = LedgerSelector(session)
        self._obligations = ObligationSelector(session)
        self._dashboard = DashboardService(session, self._clock, self._config)

    def financial_kpis(self, date_range: ReportingDateRange) -> FinancialKpis:
        """
        Totals for ``date_range`` plus pending invoices, burn rate and the
        projected cash at the end of the reporting forecast.

        Amounts are rounded half-up to cents.
        """
        with operation_context("financial_kpis"):
            return self._financial_kpis(date_range)

    def _financial_kpis(self, date_range: ReportingDateRange) -> FinancialKpis:
        today = self._clock.today()
        months = self._config.burn_rate_months
        horizon = self._config.reporting_forecast_days

        income = round_cents(sum_between(
            self._ledger.list_settled_income(date_range.end, since=date_range.start),
            date_range.start, date_range.end,
        ))
        expenses = round_cents(sum_between(
            self._ledger.list_settled_expenses(date_range.end, since=date_range.start),
            date_range.start, date_range.end,
        ))
        pending_sum, pending_count = self._obligations.pending_invoice_totals()

        recent_expenses = self._ledger.list_settled_expenses(
            today, since=add_months(today, -months),
        )
        forecast = self._dashboard.project_cashflow(horizon, as_of=today)
        forecast_end = value_at(forecast, horizon - 1)

        kpis = FinancialKpis(
            income_in_range=income,
            expenses_in_range=expenses,
            net_result=income - expenses,
            pending_invoices_sum=round_cents(pending_sum),
            pending_invoices_count=pending_count,
            burn_rate=round_cents(burn_rate(recent_expenses, today, months)),
            forecast_60=forecast_end if forecast_end is not None else Decimal("0.00"),
        )

        logger.info("financial_kpis_computed", extra={
            "today": today.isoformat(),
            "range_start": date_range.start.isoformat(),
            "range_end": date_range.end.isoformat(),
            **kpis.to_dict(),
        })
        return kpis

    def financial_charts(self, date_range: ReportingDateRange) -> FinancialCharts:
        """Monthly series and categories for ``date_range`` plus the reporting forecast."""
        with operation_context("financial_charts"):
            return self._financial_charts(date_range)

    def _financial_charts(self, date_range: ReportingDateRange) -> FinancialCharts:
        today = self._clock.today()
        charts = FinancialCharts(
            income_expenses_by_month=tuple(
                self._dashboard.income_expenses_by_month_range(date_range.start, date_range.end)
            ),
            expenses_by_category=tuple(
                self._dashboard.expenses_by_category_range(date_range.start, date_range.end)
            ),
            forecast=tuple(
                self._dashboard.project_cashflow(
                    self._config.reporting_forecast_days, as_of=today,
                )
            ),
        )

        logger.info("financial_charts_computed", extra={
            "today": today.isoformat(),
            "range_start": date_range.start.isoformat(),
            "range_end": date_range.end.isoformat(),
            "month_count": len(charts.income_expenses_by_month),
            "category_count": len(charts.expenses_by_category),
            "forecast_days": len(charts.forecast),
        })
        return charts
