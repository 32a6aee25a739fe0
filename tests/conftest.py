"""
Pytest fixtures for the cashflow test suite.

Provides:
- Structured logging configuration and log capture
- An in-memory SQLite database session with every table created
- A deterministic clock fixed on TODAY
- Row factories for invoices, expenses, contracts and settings
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from cashflow_config import reset_active_config
from cashflow_config.schema import CashflowConfig
from cashflow_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    init_engine_from_url,
    reset_engine,
)
from cashflow_kernel.domain.clock import DeterministicClock
from cashflow_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from cashflow_kernel.models import (
    FinanceContract,
    FinanceExpense,
    FinanceInvoice,
    FinanceSettings,
)

# Fixed reference date for every database-backed test.
TODAY = date(2024, 3, 1)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture(autouse=True)
def _reset_config():
    reset_active_config()
    yield
    reset_active_config()


@pytest.fixture
def captured_logs():
    """
    Capture cashflow_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, dashboard):
            dashboard.project_cashflow(10)
            logs = captured_logs()
            assert any(r["message"] == "cashflow_projected" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("cashflow_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Fresh in-memory SQLite database per test."""
    init_engine_from_url("sqlite://")
    create_tables()
    sess = Session(bind=get_engine(), expire_on_commit=False)
    yield sess
    try:
        sess.close()
        drop_tables()
    finally:
        reset_engine()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock.on(TODAY)


@pytest.fixture
def config() -> CashflowConfig:
    return CashflowConfig()


# =============================================================================
# Row factories
# =============================================================================


@pytest.fixture
def make_invoice(session):
    """Insert a finance_invoices row."""

    def _make(
        amount="100",
        status="sent",
        issue_date=None,
        due_date=None,
        title="Invoice",
        currency="EUR",
    ) -> FinanceInvoice:
        row = FinanceInvoice(
            title=title,
            amount=Decimal(amount) if amount is not None else None,
            currency=currency,
            issue_date=issue_date or TODAY,
            due_date=due_date,
            status=status,
        )
        session.add(row)
        session.flush()
        return row

    return _make


@pytest.fixture
def make_expense(session):
    """Insert a finance_expenses row."""

    def _make(
        amount="100",
        status="pending",
        expense_date=None,
        due_date=None,
        category=None,
        is_recurring=False,
        recurrence_rule=None,
        title="Expense",
    ) -> FinanceExpense:
        row = FinanceExpense(
            title=title,
            category=category,
            amount=Decimal(amount) if amount is not None else None,
            currency="EUR",
            date=expense_date or TODAY,
            due_date=due_date,
            status=status,
            is_recurring=is_recurring,
            recurrence_rule=recurrence_rule,
        )
        session.add(row)
        session.flush()
        return row

    return _make


@pytest.fixture
def make_contract(session):
    """Insert a finance_contracts row."""

    def _make(
        amount="1000",
        frequency="monthly",
        status="active",
        title="Contract",
    ) -> FinanceContract:
        row = FinanceContract(
            title=title,
            start_date=date(2024, 1, 1),
            frequency=frequency,
            amount=Decimal(amount) if amount is not None else None,
            currency="EUR",
            status=status,
        )
        session.add(row)
        session.flush()
        return row

    return _make


@pytest.fixture
def make_settings(session):
    """Insert the finance_settings row."""

    def _make(starting_cash="1000", default_currency="EUR") -> FinanceSettings:
        row = FinanceSettings(
            starting_cash=Decimal(starting_cash) if starting_cash is not None else None,
            default_currency=default_currency,
        )
        session.add(row)
        session.flush()
        return row

    return _make
