"""Pure domain types for the cashflow kernel."""

from cashflow_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from cashflow_kernel.domain.facts import (
    BillingFrequency,
    CashflowFacts,
    ContractStatus,
    ExpenseStatus,
    InvoiceStatus,
    PendingExpense,
    PendingInvoice,
    RecurringContract,
    RecurringExpense,
    SettledExpenseEvent,
    SettledIncomeEvent,
)

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "BillingFrequency",
    "CashflowFacts",
    "ContractStatus",
    "ExpenseStatus",
    "InvoiceStatus",
    "PendingExpense",
    "PendingInvoice",
    "RecurringContract",
    "RecurringExpense",
    "SettledExpenseEvent",
    "SettledIncomeEvent",
]
