"""
Reporting Module.

Financial KPIs and charts over a date range.
"""

from cashflow_modules.reporting.models import FinancialCharts, FinancialKpis, ReportingDateRange
from cashflow_modules.reporting.service import ReportingService

__all__ = [
    "FinancialCharts",
    "FinancialKpis",
    "ReportingDateRange",
    "ReportingService",
]
