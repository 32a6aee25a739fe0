"""
Module: cashflow_kernel.models.contract
Responsibility: ORM persistence for recurring income contracts
    (``finance_contracts``).
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from cashflow_kernel.db.base import TrackedBase, UUIDString


class FinanceContract(TrackedBase):
    """Recurring income contract row."""

    __tablename__ = "finance_contracts"

    __table_args__ = (Index("idx_finance_contracts_status", "status"),)

    client_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False, default="monthly")
    amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    def __repr__(self) -> str:
        return f"<FinanceContract {self.title!r} {self.amount}/{self.frequency}>"
