"""
Module: cashflow_kernel.models.settings
Responsibility: ORM persistence for the single finance settings row
    (``finance_settings``) holding the starting cash baseline.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cashflow_kernel.db.base import TrackedBase


class FinanceSettings(TrackedBase):
    """Finance settings row.  ``starting_cash`` NULL means no baseline."""

    __tablename__ = "finance_settings"

    starting_cash: Mapped[Decimal | None] = mapped_column(nullable=True)
    default_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    def __repr__(self) -> str:
        return f"<FinanceSettings starting_cash={self.starting_cash}>"
