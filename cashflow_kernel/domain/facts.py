"""
Facts -- Strongly-typed financial facts consumed by the cashflow engines.

Responsibility:
    Defines the frozen value objects for settled events, pending
    obligations, recurring agreements and the cash baseline, and the
    ``coerce_*`` functions that validate loosely-typed upstream rows
    (``Mapping[str, Any]``) into them.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Selectors call the coercion functions at the read boundary; engines
    only ever see the dataclasses defined here.

Invariants enforced:
    - All monetary amounts are ``Decimal`` (never ``float``); floats from
      upstream are converted through ``str`` to avoid binary artefacts.
    - Amounts must be finite.  Negative amounts are NOT rejected here:
      they pass through unclamped.
    - Dates are ``date`` instances; ISO strings are truncated to their
      first ten characters before parsing (timestamps are accepted).

Failure modes:
    - MalformedFactError when a required field is missing or unparsable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from cashflow_kernel.exceptions import MalformedFactError


class InvoiceStatus(Enum):
    """Invoice lifecycle states."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class ExpenseStatus(Enum):
    """Expense lifecycle states."""
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class ContractStatus(Enum):
    """Recurring contract states."""
    ACTIVE = "active"
    PENDING = "pending"
    CANCELLED = "cancelled"
    ENDED = "ended"


class BillingFrequency(Enum):
    """Billing frequency of a recurring contract."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        """Number of calendar months one billing period covers."""
        return _FREQUENCY_MONTHS[self]


_FREQUENCY_MONTHS = {
    BillingFrequency.MONTHLY: 1,
    BillingFrequency.QUARTERLY: 3,
    BillingFrequency.YEARLY: 12,
}

PENDING_INVOICE_STATUSES: tuple[InvoiceStatus, ...] = (
    InvoiceStatus.SENT,
    InvoiceStatus.OVERDUE,
)


@dataclass(frozen=True)
class SettledIncomeEvent:
    """A paid invoice."""
    amount: Decimal
    settled_date: date


@dataclass(frozen=True)
class SettledExpenseEvent:
    """A paid expense."""
    amount: Decimal
    settled_date: date
    category: str = "other"


@dataclass(frozen=True)
class PendingInvoice:
    """Receivable not yet collected."""
    amount: Decimal
    due_date: date
    status: InvoiceStatus = InvoiceStatus.SENT


@dataclass(frozen=True)
class PendingExpense:
    """One-off payable not yet paid."""
    amount: Decimal
    due_date: date
    status: ExpenseStatus = ExpenseStatus.PENDING
    recurring: bool = False


@dataclass(frozen=True)
class RecurringContract:
    """Standing income agreement with no fixed end in this model."""
    amount: Decimal
    frequency: BillingFrequency
    status: ContractStatus = ContractStatus.ACTIVE

    @property
    def monthly_amount(self) -> Decimal:
        """Frequency-normalized monthly equivalent of ``amount``."""
        return self.amount / self.frequency.months


@dataclass(frozen=True)
class RecurringExpense:
    """Standing payable recurring on the anchor's day-of-month until cancelled."""
    amount: Decimal
    anchor_due_date: date | None
    status: ExpenseStatus = ExpenseStatus.PENDING


@dataclass(frozen=True)
class CashflowFacts:
    """
    Everything the forecast and aging engines need, fetched once per call.

    Contract:
        Frozen bundle built by the service layer from the selectors.  An
        empty bundle is the degraded result of an unavailable upstream.
    """

    settled_income: tuple[SettledIncomeEvent, ...] = ()
    settled_expenses: tuple[SettledExpenseEvent, ...] = ()
    pending_invoices: tuple[PendingInvoice, ...] = ()
    pending_expenses: tuple[PendingExpense, ...] = ()
    contracts: tuple[RecurringContract, ...] = ()
    recurring_expenses: tuple[RecurringExpense, ...] = ()
    starting_cash: Decimal | None = None


# ---------------------------------------------------------------------------
# Coercion of untyped upstream rows
# ---------------------------------------------------------------------------


def coerce_amount(value: Any, fact_type: str, field_name: str = "amount") -> Decimal:
    """
    Convert an upstream amount into a finite ``Decimal``.

    Raises:
        MalformedFactError: if the value is missing, non-numeric or not finite.
    """
    if value is None or isinstance(value, bool):
        raise MalformedFactError(fact_type, field_name, value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise MalformedFactError(fact_type, field_name, value) from None
    if not amount.is_finite():
        raise MalformedFactError(fact_type, field_name, value)
    return amount


def coerce_date(value: Any, fact_type: str, field_name: str) -> date:
    """
    Convert an upstream date (``date``, ``datetime`` or ISO string) to ``date``.

    Raises:
        MalformedFactError: if the value is missing or unparsable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            raise MalformedFactError(fact_type, field_name, value) from None
    raise MalformedFactError(fact_type, field_name, value)


def _coerce_optional_date(value: Any, fact_type: str, field_name: str) -> date | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_date(value, fact_type, field_name)


def _coerce_enum(enum_cls: type[Enum], value: Any, fact_type: str, field_name: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise MalformedFactError(fact_type, field_name, value) from None


def coerce_settled_income(row: Mapping[str, Any]) -> SettledIncomeEvent:
    """Validate a paid-invoice row (``amount``, ``issue_date``)."""
    return SettledIncomeEvent(
        amount=coerce_amount(row.get("amount"), "settled_income"),
        settled_date=coerce_date(row.get("issue_date"), "settled_income", "issue_date"),
    )


def coerce_settled_expense(row: Mapping[str, Any]) -> SettledExpenseEvent:
    """Validate a paid-expense row (``amount``, ``date``, optional ``category``)."""
    category = row.get("category")
    return SettledExpenseEvent(
        amount=coerce_amount(row.get("amount"), "settled_expense"),
        settled_date=coerce_date(row.get("date"), "settled_expense", "date"),
        category=str(category).strip() if category else "other",
    )


def coerce_pending_invoice(row: Mapping[str, Any]) -> PendingInvoice:
    """Validate an unpaid invoice row; a missing due date is malformed."""
    status = _coerce_enum(
        InvoiceStatus, row.get("status", "sent"), "pending_invoice", "status"
    )
    if status not in PENDING_INVOICE_STATUSES:
        raise MalformedFactError("pending_invoice", "status", status.value)
    return PendingInvoice(
        amount=coerce_amount(row.get("amount"), "pending_invoice"),
        due_date=coerce_date(row.get("due_date"), "pending_invoice", "due_date"),
        status=status,
    )


def coerce_pending_expense(row: Mapping[str, Any]) -> PendingExpense:
    """Validate a pending one-off expense row; a missing due date is malformed."""
    return PendingExpense(
        amount=coerce_amount(row.get("amount"), "pending_expense"),
        due_date=coerce_date(row.get("due_date"), "pending_expense", "due_date"),
        recurring=bool(row.get("is_recurring", False)),
    )


def coerce_contract(row: Mapping[str, Any]) -> RecurringContract:
    """Validate an active contract row (``amount``, ``frequency``)."""
    return RecurringContract(
        amount=coerce_amount(row.get("amount"), "contract"),
        frequency=_coerce_enum(
            BillingFrequency, row.get("frequency"), "contract", "frequency"
        ),
    )


def coerce_recurring_expense(row: Mapping[str, Any]) -> RecurringExpense:
    """Validate a recurring expense row; the anchor due date is optional."""
    status = _coerce_enum(
        ExpenseStatus, row.get("status", "pending"), "recurring_expense", "status"
    )
    return RecurringExpense(
        amount=coerce_amount(row.get("amount"), "recurring_expense"),
        anchor_due_date=_coerce_optional_date(
            row.get("due_date"), "recurring_expense", "due_date"
        ),
        status=status,
    )
