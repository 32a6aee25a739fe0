"""
Finance Settings Models (``cashflow_modules.settings.models``).

Frozen view of the finance settings row, detached from the ORM session.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class FinanceSettingsView:
    """Starting cash baseline and default currency."""

    id: UUID
    starting_cash: Decimal | None
    default_currency: str

    def to_dict(self) -> dict[str, str | None]:
        return {
            "id": str(self.id),
            "starting_cash": None if self.starting_cash is None else str(self.starting_cash),
            "default_currency": self.default_currency,
        }
