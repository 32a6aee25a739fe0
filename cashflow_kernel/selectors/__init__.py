"""Selectors for the cashflow kernel (read side)."""

from cashflow_kernel.selectors.ledger_selector import LedgerSelector
from cashflow_kernel.selectors.obligation_selector import ObligationSelector
from cashflow_kernel.selectors.settings_selector import SettingsSelector

__all__ = [
    "LedgerSelector",
    "ObligationSelector",
    "SettingsSelector",
]
