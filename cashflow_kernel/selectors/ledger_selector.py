"""
Module: cashflow_kernel.selectors.ledger_selector
Responsibility: Read-only access to the two historical fact streams: settled
    income (paid invoices, dated by issue date) and settled expenses (paid
    expenses, dated by expense date).
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Only ``paid`` rows are returned; pending rows never appear here.
    - Cutoffs are inclusive on both ends.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import select

from cashflow_kernel.domain.facts import (
    ExpenseStatus,
    InvoiceStatus,
    SettledExpenseEvent,
    SettledIncomeEvent,
    coerce_settled_expense,
    coerce_settled_income,
)
from cashflow_kernel.models.expense import FinanceExpense
from cashflow_kernel.models.invoice import FinanceInvoice
from cashflow_kernel.selectors.base import BaseSelector


class LedgerSelector(BaseSelector):
    """
    Selector for settled cash movements.

    Guarantees:
        - All amounts are Decimal.
        - Results are ordered by settled date ascending.
    """

    def list_settled_income(
        self,
        up_to: date,
        since: date | None = None,
    ) -> list[SettledIncomeEvent]:
        """Paid invoices with ``since <= issue_date <= up_to``."""
        stmt = (
            select(FinanceInvoice.amount, FinanceInvoice.issue_date)
            .where(FinanceInvoice.status == InvoiceStatus.PAID.value)
            .where(FinanceInvoice.issue_date <= up_to)
        )
        if since is not None:
            stmt = stmt.where(FinanceInvoice.issue_date >= since)
        stmt = stmt.order_by(FinanceInvoice.issue_date)
        return self.read_facts("finance_invoices.paid", stmt, coerce_settled_income)

    def list_settled_expenses(
        self,
        up_to: date,
        since: date | None = None,
    ) -> list[SettledExpenseEvent]:
        """Paid expenses with ``since <= date <= up_to``."""
        stmt = (
            select(FinanceExpense.amount, FinanceExpense.date, FinanceExpense.category)
            .where(FinanceExpense.status == ExpenseStatus.PAID.value)
            .where(FinanceExpense.date <= up_to)
        )
        if since is not None:
            stmt = stmt.where(FinanceExpense.date >= since)
        stmt = stmt.order_by(FinanceExpense.date)
        return self.read_facts("finance_expenses.paid", stmt, coerce_settled_expense)

    def cumulative_net(self, up_to: date) -> Decimal:
        """Settled income minus settled expenses dated on or before ``up_to``."""
        income = sum((e.amount for e in self.list_settled_income(up_to)), Decimal("0"))
        expenses = sum((e.amount for e in self.list_settled_expenses(up_to)), Decimal("0"))
        return income - expenses
