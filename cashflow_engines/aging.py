"""
Module: cashflow_engines.aging
Responsibility:
    Classify outstanding receivables and payables into near-term
    due-proximity buckets (coming due, overdue 1-30 days, overdue 31-60
    days) and total each bucket.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import cashflow_kernel/domain.

Invariants enforced:
    - Purity: no clock access; ``as_of_date`` is a parameter.
    - Decimal-only arithmetic.
    - Every item lands in at most one bucket.  Items more than 60 days
      overdue or due more than 30 days out land in none: the summary only
      covers near-term liquidity.

Failure modes:
    - ValueError on a malformed bucket definition.

Usage:
    from cashflow_engines.aging import AgingSummarizer

    summary = AgingSummarizer().summarize(
        invoices=pending_invoices,
        expenses=pending_expenses,
        as_of_date=date(2024, 3, 1),
    )
    summary.invoices_overdue_1_30
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from cashflow_engines.tracer import traced_engine
from cashflow_kernel.logging_config import get_logger

logger = get_logger("engines.aging")

ZERO = Decimal("0")


class DatedAmount(Protocol):
    """Anything with an ``amount`` and a ``due_date``."""

    amount: Decimal
    due_date: date


@dataclass(frozen=True)
class AgeBucket:
    """
    A contiguous, inclusive range of signed ages in days.

    Age is ``as_of_date - due_date``: negative means not yet due, zero
    means due today.

    Guarantees:
        - max_days >= min_days.
    """

    name: str
    min_days: int
    max_days: int

    def __post_init__(self) -> None:
        if self.max_days < self.min_days:
            raise ValueError("max_days cannot be less than min_days")

    def contains(self, age_days: int) -> bool:
        """Check if age falls within this bucket."""
        return self.min_days <= age_days <= self.max_days


COMING_DUE = AgeBucket("coming_due", -30, -1)
OVERDUE_1_30 = AgeBucket("overdue_1_30", 0, 30)
OVERDUE_31_60 = AgeBucket("overdue_31_60", 31, 60)

OWING_BUCKETS: tuple[AgeBucket, ...] = (COMING_DUE, OVERDUE_1_30, OVERDUE_31_60)


@dataclass(frozen=True)
class AgingSummary:
    """Receivable and payable totals per due-proximity bucket."""

    invoices_coming_due: Decimal = ZERO
    invoices_overdue_1_30: Decimal = ZERO
    invoices_overdue_31_60: Decimal = ZERO
    expenses_coming_due: Decimal = ZERO
    expenses_overdue_1_30: Decimal = ZERO
    expenses_overdue_31_60: Decimal = ZERO

    def to_dict(self) -> dict[str, str]:
        return {name: str(value) for name, value in vars(self).items()}


class AgingSummarizer:
    """
    Due-proximity aging for pending invoices and expenses.

    Contract:
        Pure functions -- no I/O, no database access.
    Guarantees:
        - ``classify`` returns at most one bucket for any age.
        - Invoices and expenses use the same classification.
    """

    DEFAULT_BUCKETS = OWING_BUCKETS

    @staticmethod
    def calculate_age(due_date: date, as_of_date: date) -> int:
        """Signed days past due (negative when not yet due)."""
        return (as_of_date - due_date).days

    def classify(
        self,
        age_days: int,
        buckets: Sequence[AgeBucket] | None = None,
    ) -> AgeBucket | None:
        """The bucket containing ``age_days``, or None when outside every window."""
        for bucket in buckets or self.DEFAULT_BUCKETS:
            if bucket.contains(age_days):
                return bucket
        return None

    def bucket_totals(
        self,
        items: Iterable[DatedAmount],
        as_of_date: date,
        buckets: Sequence[AgeBucket] | None = None,
    ) -> dict[str, Decimal]:
        """
        Sum of amounts per bucket name.

        Returns:
            A total for every bucket (zero when empty).
        """
        buckets = buckets or self.DEFAULT_BUCKETS
        totals = {bucket.name: ZERO for bucket in buckets}
        excluded = 0
        for item in items:
            bucket = self.classify(self.calculate_age(item.due_date, as_of_date), buckets)
            if bucket is None:
                excluded += 1
                continue
            totals[bucket.name] += item.amount

        logger.debug("aging_buckets_totalled", extra={
            "as_of_date": as_of_date.isoformat(),
            "excluded_count": excluded,
            **{name: str(total) for name, total in totals.items()},
        })
        return totals

    @traced_engine("aging", "1.0", fingerprint_fields=("invoices", "expenses", "as_of_date"))
    def summarize(
        self,
        *,
        invoices: Sequence[DatedAmount],
        expenses: Sequence[DatedAmount],
        as_of_date: date,
    ) -> AgingSummary:
        """Receivables and payables bucketed independently with the same windows."""
        inv = self.bucket_totals(invoices, as_of_date)
        exp = self.bucket_totals(expenses, as_of_date)
        summary = AgingSummary(
            invoices_coming_due=inv[COMING_DUE.name],
            invoices_overdue_1_30=inv[OVERDUE_1_30.name],
            invoices_overdue_31_60=inv[OVERDUE_31_60.name],
            expenses_coming_due=exp[COMING_DUE.name],
            expenses_overdue_1_30=exp[OVERDUE_1_30.name],
            expenses_overdue_31_60=exp[OVERDUE_31_60.name],
        )

        logger.info("aging_summarized", extra={
            "as_of_date": as_of_date.isoformat(),
            "invoice_count": len(invoices),
            "expense_count": len(expenses),
        })
        return summary
