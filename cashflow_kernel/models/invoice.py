"""
Module: cashflow_kernel.models.invoice
Responsibility: ORM persistence for customer invoices (``finance_invoices``).
Architecture position: Kernel > Models.  May import from db/base.py only.

A paid invoice is a settled income event dated by its ``issue_date``;
``sent`` and ``overdue`` invoices are pending receivables.  ``status`` is
kept as free text because rows are written by collaborators outside this
package; selectors validate it on read.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from cashflow_kernel.db.base import TrackedBase, UUIDString


class FinanceInvoice(TrackedBase):
    """Customer invoice row."""

    __tablename__ = "finance_invoices"

    __table_args__ = (
        Index("idx_finance_invoices_status", "status"),
        Index("idx_finance_invoices_issue_date", "issue_date"),
    )

    contract_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    def __repr__(self) -> str:
        return f"<FinanceInvoice {self.title!r} {self.amount} {self.status}>"
