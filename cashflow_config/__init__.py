"""
cashflow_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides ``get_active_config()``, which loads and caches the
    ``CashflowConfig`` for the process.  Services take a config through
    their constructor and fall back to this one.

Audit relevance:
    The first load emits a ``CASHFLOW_CONFIG_TRACE`` log entry carrying
    the config checksum, so every computation can be tied back to the
    settings that governed it.
"""

from __future__ import annotations

from pathlib import Path

from cashflow_config.loader import compute_checksum, load_config
from cashflow_config.schema import CashflowConfig
from cashflow_kernel.logging_config import get_logger

_logger = get_logger("config")

_active: CashflowConfig | None = None


def get_active_config(path: Path | None = None) -> CashflowConfig:
    """
    The process-wide configuration, loaded on first use.

    ``path`` only matters on the first call; later calls return the
    cached object until ``reset_active_config()``.
    """
    global _active
    if _active is None:
        _active = load_config(path)
        _logger.info(
            "CASHFLOW_CONFIG_TRACE",
            extra={
                "trace_type": "CASHFLOW_CONFIG_TRACE",
                "checksum": compute_checksum(_active),
                "source": str(path) if path else "defaults",
                "default_horizon_days": _active.default_horizon_days,
                "max_horizon_days": _active.max_horizon_days,
            },
        )
    return _active


def reset_active_config() -> None:
    """Drop the cached configuration. Intended for tests."""
    global _active
    _active = None


__all__ = [
    "CashflowConfig",
    "compute_checksum",
    "get_active_config",
    "load_config",
    "reset_active_config",
]
