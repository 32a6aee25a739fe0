"""
Module: cashflow_kernel.models.expense
Responsibility: ORM persistence for expenses (``finance_expenses``).
Architecture position: Kernel > Models.  May import from db/base.py only.

One table holds both one-off and recurring payables.  ``paid`` rows are
settled expense events dated by ``date``; ``pending`` one-off rows with a
due date are pending payables; ``is_recurring`` rows that are not
``cancelled`` recur monthly from ``due_date``.
"""

from datetime import date as date_type
from decimal import Decimal

from sqlalchemy import Boolean, Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from cashflow_kernel.db.base import TrackedBase


class FinanceExpense(TrackedBase):
    """Expense row."""

    __tablename__ = "finance_expenses"

    __table_args__ = (
        Index("idx_finance_expenses_status", "status"),
        Index("idx_finance_expenses_date", "date"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    vendor: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurrence_rule: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<FinanceExpense {self.title!r} {self.amount} {self.status}>"
