"""
Module: cashflow_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the import surface for cashflow_modules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import cashflow_kernel/domain (and sibling engine modules).
    MUST NOT import cashflow_modules.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      The reference date is always a parameter supplied by the caller.
    - Decimal-only arithmetic; floats are never used for money.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Forecast and aging invocations are traced via ``@traced_engine``
    (see ``cashflow_engines.tracer``), emitting CASHFLOW_ENGINE_TRACE
    records with engine name, version, input fingerprint and duration.

Usage:
    from cashflow_engines.forecast import CashflowForecaster
    from cashflow_engines.aging import AgingSummarizer
    from cashflow_engines.kpis import burn_rate
"""

from cashflow_engines.aging import (
    COMING_DUE,
    OVERDUE_1_30,
    OVERDUE_31_60,
    OWING_BUCKETS,
    AgeBucket,
    AgingSummarizer,
    AgingSummary,
)
from cashflow_engines.forecast import (
    CashflowForecaster,
    ForecastDay,
    round_cents,
    value_at,
)
from cashflow_engines.kpis import (
    CategoryTotal,
    MonthlyTotals,
    burn_rate,
    expenses_by_category,
    income_expenses_by_month,
    sum_between,
)
from cashflow_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "AgeBucket",
    "AgingSummarizer",
    "AgingSummary",
    "COMING_DUE",
    "CashflowForecaster",
    "CategoryTotal",
    "ForecastDay",
    "MonthlyTotals",
    "OVERDUE_1_30",
    "OVERDUE_31_60",
    "OWING_BUCKETS",
    "burn_rate",
    "compute_input_fingerprint",
    "expenses_by_category",
    "income_expenses_by_month",
    "round_cents",
    "sum_between",
    "traced_engine",
    "value_at",
]
