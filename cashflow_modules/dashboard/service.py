"""
Dashboard Module Service (``cashflow_modules.dashboard.service``).

Responsibility
--------------
Orchestrates the cash dashboard -- daily cash forecast, near-term aging
summary, headline KPIs and the monthly/category charts -- by bridging the
kernel selectors to the pure engines in ``cashflow_engines``.  This is a
**read-only** service.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config``.  All computation lives in engines; all reads live in
selectors.

Invariants enforced
-------------------
* Every public entry point reads ``clock.today()`` exactly once and passes
  that date to every sub-computation.
* Facts are fetched once per entry point, up front.
* Every entry point logs under ``operation_context`` so its engine and
  selector records share one ``correlation_id``.
* Read-only -- no mutations.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.

Failure modes
-------------
* Upstream read failure  -> selectors degrade to empty facts; the output
  keeps its shape (a flat projection, zero totals).
* Horizon negative, non-integer or above ``max_horizon_days``  ->
  ``InvalidHorizonError`` before any query runs.
* Range with ``end < start``  -> ``ValueError`` before any query runs.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from cashflow_config import get_active_config
from cashflow_config.schema import CashflowConfig
from cashflow_engines.aging import AgingSummarizer, AgingSummary
from cashflow_engines.calendar import last_of_month, month_range
from cashflow_engines.forecast import CashflowForecaster, ForecastDay, round_cents, value_at
from cashflow_engines.kpis import (
    CategoryTotal,
    MonthlyTotals,
    burn_rate,
    expenses_by_category,
    income_expenses_by_month,
    sum_between,
)
from cashflow_kernel.domain.clock import Clock, SystemClock
from cashflow_kernel.domain.facts import CashflowFacts
from cashflow_kernel.exceptions import InvalidHorizonError
from cashflow_kernel.logging_config import get_logger, operation_context
from cashflow_kernel.selectors.ledger_selector import LedgerSelector
from cashflow_kernel.selectors.obligation_selector import ObligationSelector
from cashflow_kernel.selectors.settings_selector import SettingsSelector

from cashflow_modules.dashboard.models import DashboardKpis

logger = get_logger("modules.dashboard.service")


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise ValueError(f"end ({end}) must not precede start ({start})")


class DashboardService:
    """
    Cash forecast, aging and KPI aggregation.

    Contract
    --------
    * ``project_cashflow`` returns exactly ``horizon_days`` points starting
      today.
    * ``compute_kpis`` never raises on upstream failure; it reports zeros.

    Non-goals
    ---------
    * No caching: every call recomputes from the store.
    * No currency conversion.
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
        self._settings = SettingsSelector(session)
        self._forecaster = CashflowForecaster()
        self._aging = AgingSummarizer()

    # ------------------------------------------------------------------
    # Fact loading
    # ------------------------------------------------------------------

    def load_facts(
        self,
        today: date,
        starting_cash: Decimal | None,
        settled_up_to: date | None = None,
    ) -> CashflowFacts:
        """
        Fetch every fact stream the forecast needs.

        Args:
            today: The reference date captured by the caller.
            starting_cash: Baseline to seed base cash with.
            settled_up_to: Cutoff for settled events; defaults to ``today``.
                KPIs pass the month end so this month's totals see every
                settled event dated in it.
        """
        cutoff = settled_up_to or today
        facts = CashflowFacts(
            settled_income=tuple(self._ledger.list_settled_income(cutoff)),
            settled_expenses=tuple(self._ledger.list_settled_expenses(cutoff)),
            pending_invoices=tuple(self._obligations.list_pending_invoices()),
            pending_expenses=tuple(self._obligations.list_pending_expenses()),
            contracts=tuple(self._obligations.list_active_contracts()),
            recurring_expenses=tuple(self._obligations.list_recurring_expenses()),
            starting_cash=starting_cash,
        )
        logger.debug("facts_loaded", extra={
            "today": today.isoformat(),
            "settled_up_to": cutoff.isoformat(),
            "settled_income_count": len(facts.settled_income),
            "settled_expense_count": len(facts.settled_expenses),
            "pending_invoice_count": len(facts.pending_invoices),
            "pending_expense_count": len(facts.pending_expenses),
            "contract_count": len(facts.contracts),
            "recurring_expense_count": len(facts.recurring_expenses),
            "has_starting_cash": starting_cash is not None,
        })
        return facts

    def _validate_horizon(self, horizon_days: object) -> int:
        limit = self._config.max_horizon_days
        if (
            isinstance(horizon_days, bool)
            or not isinstance(horizon_days, int)
            or not 0 <= horizon_days <= limit
        ):
            raise InvalidHorizonError(horizon_days, limit)
        return horizon_days

    # ------------------------------------------------------------------
    # Forecast
    # ------------------------------------------------------------------

    def project_cashflow(
        self,
        horizon_days: int | None = None,
        as_of: date | None = None,
    ) -> list[ForecastDay]:
        """
        Daily projected cash for ``horizon_days`` days from today.

        The baseline comes from the finance settings.

        Args:
            horizon_days: Defaults to ``config.default_horizon_days``.
            as_of: Reference date for callers that already captured today.

        Raises:
            InvalidHorizonError: on a negative, non-integer or too-large
                horizon.
        """
        with operation_context("project_cashflow"):
            horizon = self._validate_horizon(
                self._config.default_horizon_days if horizon_days is None else horizon_days
            )
            today = as_of or self._clock.today()
            facts = self.load_facts(today, self._settings.get_cash_baseline())
            return self._forecaster.project(facts=facts, today=today, horizon_days=horizon)

    # ------------------------------------------------------------------
    # Aging
    # ------------------------------------------------------------------

    def summarize_aging(self) -> AgingSummary:
        """
        Pending receivables and payables by due proximity.

        Every pending expense with a due date counts, recurring or not.
        """
        with operation_context("summarize_aging"):
            today = self._clock.today()
            invoices = self._obligations.list_pending_invoices()
            expenses = self._obligations.list_pending_expenses(include_recurring=True)
            return self._aging.summarize(invoices=invoices, expenses=expenses, as_of_date=today)

    # ------------------------------------------------------------------
    # KPIs
    # ------------------------------------------------------------------

    def compute_kpis(self, starting_cash: Decimal | None) -> DashboardKpis:
        """
        Headline figures for this month and the previous one.

        Every amount is rounded half-up to cents.

        Args:
            starting_cash: The configured baseline.  None leaves the cash
                position and 30-day forecast unset.
        """
        with operation_context("compute_kpis"):
            return self._compute_kpis(starting_cash)

    def _compute_kpis(self, starting_cash: Decimal | None) -> DashboardKpis:
        today = self._clock.today()
        this_start, this_end = month_range(today, 0)
        prev_start, prev_end = month_range(today, -1)

        facts = self.load_facts(today, starting_cash, settled_up_to=this_end)
        income, expenses = facts.settled_income, facts.settled_expenses

        income_this = round_cents(sum_between(income, this_start, this_end))
        expenses_this = round_cents(sum_between(expenses, this_start, this_end))

        cash_position: Decimal | None = None
        forecast_30: Decimal | None = None
        if starting_cash is not None:
            cash_position = round_cents(
                self._forecaster.base_cash(income, expenses, today, starting_cash)
            )
            horizon = self._config.kpi_forecast_days
            series = self._forecaster.project(facts=facts, today=today, horizon_days=horizon)
            forecast_30 = value_at(series, horizon - 1)
            if forecast_30 is None:
                forecast_30 = cash_position

        kpis = DashboardKpis(
            income_this_month=income_this,
            expenses_this_month=expenses_this,
            net_result_this_month=income_this - expenses_this,
            cash_position=cash_position,
            forecast_next_30_days=forecast_30,
            burn_rate_last_3_months=round_cents(
                burn_rate(expenses, today, self._config.burn_rate_months)
            ),
            income_prev_month=round_cents(sum_between(income, prev_start, prev_end)),
            expenses_prev_month=round_cents(sum_between(expenses, prev_start, prev_end)),
        )

        logger.info("kpis_computed", extra={"today": today.isoformat(), **kpis.to_dict()})
        return kpis

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def income_expenses_by_month(self, months_back: int = 12) -> list[MonthlyTotals]:
        """Monthly totals from ``months_back`` months ago through this month."""
        if months_back < 0:
            raise ValueError(f"months_back must be non-negative, got {months_back}")
        today = self._clock.today()
        start, _ = month_range(today, -months_back)
        return self.income_expenses_by_month_range(start, last_of_month(today))

    def income_expenses_by_month_range(self, start: date, end: date) -> list[MonthlyTotals]:
        """One zero-filled row per month touched by ``[start, end]``, ascending."""
        _check_range(start, end)
        with operation_context("income_expenses_by_month"):
            income = self._ledger.list_settled_income(end, since=start)
            expenses = self._ledger.list_settled_expenses(end, since=start)
            rows = income_expenses_by_month(income, expenses, start, end)

            logger.info("income_expenses_by_month_computed", extra={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "month_count": len(rows),
            })
            return rows

    def expenses_by_category(self, months_back: int = 3) -> list[CategoryTotal]:
        """Settled expenses per category from ``months_back`` months ago through this month."""
        if months_back < 0:
            raise ValueError(f"months_back must be non-negative, got {months_back}")
        today = self._clock.today()
        start, _ = month_range(today, -months_back)
        return self.expenses_by_category_range(start, last_of_month(today))

    def expenses_by_category_range(self, start: date, end: date) -> list[CategoryTotal]:
        _check_range(start, end)
        with operation_context("expenses_by_category"):
            expenses = self._ledger.list_settled_expenses(end, since=start)
            rows = expenses_by_category(expenses, start, end)

            logger.info("expenses_by_category_computed", extra={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "category_count": len(rows),
            })
            return rows
