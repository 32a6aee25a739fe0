"""
Finance Settings Service (``cashflow_modules.settings.service``).

Responsibility
--------------
Reads and updates the single ``finance_settings`` row: the starting cash
baseline the forecast is seeded with, and the default currency.

Architecture position
---------------------
**Modules layer**.  This service owns its transaction boundary: it
commits on success and rolls back on failure.

Invariants enforced
-------------------
* Starting cash is either None (no baseline) or a finite, non-negative
  Decimal.
* Currency codes are three upper-case letters.

Failure modes
-------------
* Negative or non-finite starting cash  -> ``InvalidBaselineError``.
* Update with no settings row  -> ``SettingsNotFoundError``.
* Malformed currency code  -> ``ValueError``.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from cashflow_kernel.exceptions import InvalidBaselineError, SettingsNotFoundError
from cashflow_kernel.logging_config import get_logger, operation_context
from cashflow_kernel.models.settings import FinanceSettings

from cashflow_modules.settings.models import FinanceSettingsView

logger = get_logger("modules.settings.service")

_UNSET: Any = object()
DEFAULT_CURRENCY = "EUR"


def validate_starting_cash(value: Any) -> Decimal | None:
    """
    Normalize a baseline to Decimal, or None to clear it.

    Raises:
        InvalidBaselineError: for booleans, unparsable, non-finite or
            negative values.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidBaselineError(value, "not a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidBaselineError(value, "not a number") from exc
    if not amount.is_finite():
        raise InvalidBaselineError(value, "not finite")
    if amount < 0:
        raise InvalidBaselineError(value, "negative")
    return amount


def validate_currency(code: str) -> str:
    if not (isinstance(code, str) and len(code) == 3 and code.isalpha() and code.isupper()):
        raise ValueError(f"Invalid currency code: {code!r}")
    return code


def _to_view(row: FinanceSettings) -> FinanceSettingsView:
    return FinanceSettingsView(
        id=row.id,
        starting_cash=row.starting_cash,
        default_currency=row.default_currency,
    )


class SettingsService:
    """
    Finance settings read/update.

    Transaction boundary: ``update_settings`` and ``ensure_settings``
    commit on success and roll back on failure.
    """

    def __init__(self, session: Session):
        self._session = session

    def _first_row(self) -> FinanceSettings | None:
        stmt = select(FinanceSettings).order_by(FinanceSettings.created_at).limit(1)
        return self._session.scalars(stmt).first()

    def get_settings(self) -> FinanceSettingsView | None:
        """The settings row, or None when none exists."""
        row = self._first_row()
        return _to_view(row) if row is not None else None

    def ensure_settings(self, default_currency: str = DEFAULT_CURRENCY) -> FinanceSettingsView:
        """Return the settings row, creating an empty one when missing."""
        row = self._first_row()
        if row is not None:
            return _to_view(row)

        try:
            row = FinanceSettings(
                starting_cash=None,
                default_currency=validate_currency(default_currency),
            )
            self._session.add(row)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info("finance_settings_created", extra={
            "settings_id": str(row.id),
            "default_currency": row.default_currency,
        })
        return _to_view(row)

    def update_settings(
        self,
        *,
        starting_cash: Any = _UNSET,
        default_currency: Any = _UNSET,
    ) -> FinanceSettingsView:
        """
        Update the given fields; omitted fields are left unchanged.

        Args:
            starting_cash: New baseline, or None to clear it.
            default_currency: ISO 4217 code.

        Raises:
            InvalidBaselineError: on a negative or non-finite baseline.
            SettingsNotFoundError: when no settings row exists.
        """
        changes: dict[str, Any] = {}
        if starting_cash is not _UNSET:
            changes["starting_cash"] = validate_starting_cash(starting_cash)
        if default_currency is not _UNSET:
            changes["default_currency"] = validate_currency(default_currency)

        with operation_context("update_settings"):
            try:
                row = self._first_row()
                if row is None:
                    raise SettingsNotFoundError()
                for name, value in changes.items():
                    setattr(row, name, value)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            logger.info("finance_settings_updated", extra={
                "settings_id": str(row.id),
                "fields": sorted(changes),
                "starting_cash": str(row.starting_cash) if row.starting_cash is not None else None,
                "default_currency": row.default_currency,
            })
            return _to_view(row)
