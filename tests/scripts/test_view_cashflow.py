"""Tests for the view_cashflow command-line viewer."""

import json
import logging
import sys
from datetime import date, timedelta
from decimal import Decimal

import pytest

from cashflow_kernel.db.engine import (
    create_tables,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from cashflow_kernel.models import FinanceInvoice, FinanceSettings
from scripts import view_cashflow


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'cash.db'}"
    init_engine_from_url(url)
    create_tables()
    with session_scope() as session:
        session.add(FinanceSettings(starting_cash=Decimal("1000"), default_currency="EUR"))
        session.add(FinanceInvoice(
            title="Open invoice",
            amount=Decimal("200"),
            status="sent",
            issue_date=date.today(),
            due_date=date.today() + timedelta(days=2),
        ))
    reset_engine()
    yield url
    reset_engine()
    logging.getLogger("cashflow_kernel").setLevel(logging.DEBUG)


class TestViewCashflow:
    """Tests for the CLI entry point."""

    def test_json_output(self, db_url, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["view_cashflow.py", "--db-url", db_url, "--days", "5", "--json"])

        assert view_cashflow.main() == 0

        payload = json.loads(capsys.readouterr().out)
        assert len(payload["forecast"]) == 5
        assert payload["forecast"][0]["projected_cash"] == "1000.00"
        assert payload["forecast"][-1]["projected_cash"] == "1200.00"
        assert payload["kpis"]["cash_position"] == "1000.00"
        assert Decimal(payload["aging"]["invoices_coming_due"]) == Decimal("200")

    def test_text_output(self, db_url, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["view_cashflow.py", "--db-url", db_url, "--days", "3"])

        assert view_cashflow.main() == 0

        out = capsys.readouterr().out
        assert "CASH FORECAST (3 days)" in out
        assert "AGING" in out
        assert "KPIS" in out

    def test_invalid_horizon(self, db_url, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["view_cashflow.py", "--db-url", db_url, "--days", "-1"])

        assert view_cashflow.main() == 1
        assert "INVALID_HORIZON" in capsys.readouterr().err

    def test_applies_configured_log_level(self, db_url, tmp_path, monkeypatch, capsys):
        config_file = tmp_path / "cashflow.yaml"
        config_file.write_text("log_level: WARNING\n")
        monkeypatch.setattr(sys, "argv", [
            "view_cashflow.py", "--db-url", db_url, "--config", str(config_file), "--json",
        ])

        assert view_cashflow.main() == 0

        assert logging.getLogger("cashflow_kernel").level == logging.WARNING
        # the report on stdout stays parseable
        assert json.loads(capsys.readouterr().out)["kpis"]["cash_position"] == "1000.00"
