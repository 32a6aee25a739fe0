"""Tests for SettingsSelector."""

from decimal import Decimal

from sqlalchemy import text

from cashflow_kernel.selectors.settings_selector import SettingsSelector


class TestCashBaseline:
    """Tests for the starting cash read."""

    def test_configured_baseline(self, session, make_settings):
        make_settings("2500.50")

        assert SettingsSelector(session).get_cash_baseline() == Decimal("2500.50")

    def test_no_row(self, session):
        assert SettingsSelector(session).get_cash_baseline() is None

    def test_null_baseline(self, session, make_settings):
        make_settings(None)

        assert SettingsSelector(session).get_cash_baseline() is None

    def test_unavailable_store(self, session, captured_logs):
        session.execute(text("DROP TABLE finance_settings"))
        session.commit()

        assert SettingsSelector(session).get_cash_baseline() is None
        assert any(r["message"] == "upstream_unavailable" for r in captured_logs())
