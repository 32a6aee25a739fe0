"""
CashflowConfig schema.

The single typed configuration object for the cashflow system.  YAML
documents are parsed into it by the loader; services receive it through
their constructor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


@dataclass(frozen=True)
class CashflowConfig:
    """
    Runtime settings for forecasting and reporting.

    Guarantees:
        - Every horizon is a non-negative int no larger than
          ``max_horizon_days``.
        - ``log_level`` is a standard logging level name.
    """

    database_url: str = "sqlite://"
    log_level: str = "INFO"
    default_horizon_days: int = 90
    kpi_forecast_days: int = 30
    reporting_forecast_days: int = 60
    burn_rate_months: int = 3
    max_horizon_days: int = 730

    def __post_init__(self) -> None:
        if not self.database_url:
            raise ValueError("database_url must not be empty")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log_level: {self.log_level!r}")
        if self.max_horizon_days < 0:
            raise ValueError("max_horizon_days must be non-negative")
        for name in ("default_horizon_days", "kpi_forecast_days", "reporting_forecast_days"):
            value = getattr(self, name)
            if not 0 <= value <= self.max_horizon_days:
                raise ValueError(
                    f"{name} must be between 0 and {self.max_horizon_days}, got {value}"
                )
        if self.burn_rate_months < 1:
            raise ValueError("burn_rate_months must be at least 1")

    def to_dict(self) -> dict[str, object]:
        return {
            "database_url": self.database_url,
            "log_level": self.log_level,
            "default_horizon_days": self.default_horizon_days,
            "kpi_forecast_days": self.kpi_forecast_days,
            "reporting_forecast_days": self.reporting_forecast_days,
            "burn_rate_months": self.burn_rate_months,
            "max_horizon_days": self.max_horizon_days,
        }
