"""
Finance Settings Module.

Owns the starting cash baseline that seeds the cash forecast.
"""

from cashflow_modules.settings.models import FinanceSettingsView
from cashflow_modules.settings.service import SettingsService

__all__ = [
    "FinanceSettingsView",
    "SettingsService",
]
