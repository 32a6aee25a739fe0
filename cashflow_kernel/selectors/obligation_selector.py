"""
Module: cashflow_kernel.selectors.obligation_selector
Responsibility: Read-only access to the forward-looking fact streams: pending
    invoices, pending one-off expenses, active recurring contracts and
    recurring expenses.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Pending invoices are ``sent`` or ``overdue`` only; paid invoices never
      appear here (mutually exclusive with LedgerSelector).
    - A pending invoice or expense without a due date is a malformed fact
      and is skipped with a warning.
"""

from decimal import Decimal

from sqlalchemy import func, select

from cashflow_kernel.domain.facts import (
    PENDING_INVOICE_STATUSES,
    ContractStatus,
    ExpenseStatus,
    PendingExpense,
    PendingInvoice,
    RecurringContract,
    RecurringExpense,
    coerce_contract,
    coerce_pending_expense,
    coerce_pending_invoice,
    coerce_recurring_expense,
)
from cashflow_kernel.exceptions import UpstreamUnavailableError
from cashflow_kernel.logging_config import get_logger
from cashflow_kernel.models.contract import FinanceContract
from cashflow_kernel.models.expense import FinanceExpense
from cashflow_kernel.models.invoice import FinanceInvoice
from cashflow_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.obligation")

_PENDING_INVOICE_VALUES = [s.value for s in PENDING_INVOICE_STATUSES]


class ObligationSelector(BaseSelector):
    """Selector for unsettled receivables, payables and recurring agreements."""

    def list_pending_invoices(self) -> list[PendingInvoice]:
        """Invoices in ``sent`` or ``overdue`` status."""
        stmt = (
            select(FinanceInvoice.amount, FinanceInvoice.due_date, FinanceInvoice.status)
            .where(FinanceInvoice.status.in_(_PENDING_INVOICE_VALUES))
            .order_by(FinanceInvoice.due_date)
        )
        return self.read_facts("finance_invoices.pending", stmt, coerce_pending_invoice)

    def list_pending_expenses(self, include_recurring: bool = False) -> list[PendingExpense]:
        """
        Expenses in ``pending`` status.

        Args:
            include_recurring: The forecast wants one-off expenses only
                (recurring ones are projected separately); the aging
                summary takes every pending expense with a due date.
        """
        stmt = select(
            FinanceExpense.amount,
            FinanceExpense.due_date,
            FinanceExpense.is_recurring,
        ).where(FinanceExpense.status == ExpenseStatus.PENDING.value)
        if not include_recurring:
            stmt = stmt.where(FinanceExpense.is_recurring.is_(False))
        stmt = stmt.order_by(FinanceExpense.due_date)
        return self.read_facts("finance_expenses.pending", stmt, coerce_pending_expense)

    def list_active_contracts(self) -> list[RecurringContract]:
        """Contracts in ``active`` status."""
        stmt = select(FinanceContract.amount, FinanceContract.frequency).where(
            FinanceContract.status == ContractStatus.ACTIVE.value
        )
        return self.read_facts("finance_contracts.active", stmt, coerce_contract)

    def list_recurring_expenses(self) -> list[RecurringExpense]:
        """Recurring expenses that are not ``cancelled``."""
        stmt = (
            select(FinanceExpense.amount, FinanceExpense.due_date, FinanceExpense.status)
            .where(FinanceExpense.is_recurring.is_(True))
            .where(FinanceExpense.status != ExpenseStatus.CANCELLED.value)
            .order_by(FinanceExpense.due_date)
        )
        return self.read_facts("finance_expenses.recurring", stmt, coerce_recurring_expense)

    def pending_invoice_totals(self) -> tuple[Decimal, int]:
        """
        Sum and count of every pending invoice, with or without a due date.

        Returns:
            ``(sum, count)``; ``(0, 0)`` when the store is unavailable.
        """
        stmt = select(
            func.coalesce(func.sum(FinanceInvoice.amount), 0).label("total"),
            func.count(FinanceInvoice.id).label("count"),
        ).where(FinanceInvoice.status.in_(_PENDING_INVOICE_VALUES))
        try:
            rows = self.guarded_read("finance_invoices.pending_totals", stmt)
        except UpstreamUnavailableError as exc:
            logger.warning("upstream_unavailable", extra={
                "source": exc.source,
                "reason": exc.reason,
            })
            return Decimal("0"), 0
        row = rows[0]
        return Decimal(str(row["total"])), int(row["count"])
