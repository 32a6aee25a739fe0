"""
Dashboard Module.

Cash forecast, near-term aging and headline KPIs over the finance
tables.  Forecast, aging and KPI arithmetic come from shared engines.
"""

from cashflow_modules.dashboard.models import DashboardKpis
from cashflow_modules.dashboard.service import DashboardService

__all__ = [
    "DashboardKpis",
    "DashboardService",
]
