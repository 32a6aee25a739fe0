"""ORM models for the cashflow kernel."""

from cashflow_kernel.models.contract import FinanceContract
from cashflow_kernel.models.expense import FinanceExpense
from cashflow_kernel.models.invoice import FinanceInvoice
from cashflow_kernel.models.settings import FinanceSettings

__all__ = [
    "FinanceContract",
    "FinanceExpense",
    "FinanceInvoice",
    "FinanceSettings",
]
