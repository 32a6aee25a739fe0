"""
Module: cashflow_kernel.selectors.settings_selector
Responsibility: Read-only access to the finance settings row and its cash
    baseline.
Architecture position: Kernel > Selectors.
"""

from decimal import Decimal

from sqlalchemy import select

from cashflow_kernel.domain.facts import coerce_amount
from cashflow_kernel.exceptions import MalformedFactError, UpstreamUnavailableError
from cashflow_kernel.logging_config import get_logger
from cashflow_kernel.models.settings import FinanceSettings
from cashflow_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.settings")


class SettingsSelector(BaseSelector):
    """Selector for the single finance settings row."""

    def get_cash_baseline(self) -> Decimal | None:
        """
        Configured starting cash, or None when absent.

        None covers: no settings row, NULL starting cash, an unreadable
        value, and an unavailable store.
        """
        stmt = select(FinanceSettings.starting_cash).order_by(FinanceSettings.created_at).limit(1)
        try:
            rows = self.guarded_read("finance_settings", stmt)
        except UpstreamUnavailableError as exc:
            logger.warning("upstream_unavailable", extra={
                "source": exc.source,
                "reason": exc.reason,
            })
            return None
        if not rows or rows[0]["starting_cash"] is None:
            return None
        try:
            return coerce_amount(rows[0]["starting_cash"], "cash_baseline", "starting_cash")
        except MalformedFactError as exc:
            logger.warning("malformed_fact_skipped", extra={
                "source": "finance_settings",
                "fact_type": exc.fact_type,
                "field": exc.field,
            })
            return None
