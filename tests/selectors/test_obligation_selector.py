"""
Tests for ObligationSelector.

Covers:
- Pending invoice and expense status filtering
- Recurring expense selection
- Active contracts
- Pending invoice totals
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import text

from cashflow_kernel.domain.facts import BillingFrequency
from cashflow_kernel.selectors.obligation_selector import ObligationSelector

TODAY = date(2024, 3, 1)


class TestPendingInvoices:
    """Tests for unpaid invoices."""

    def test_sent_and_overdue_only(self, session, make_invoice):
        make_invoice("100", status="sent", due_date=date(2024, 3, 5))
        make_invoice("200", status="overdue", due_date=date(2024, 2, 5))
        make_invoice("300", status="paid", due_date=date(2024, 2, 5))
        make_invoice("400", status="draft", due_date=date(2024, 3, 5))
        make_invoice("500", status="cancelled", due_date=date(2024, 3, 5))

        invoices = ObligationSelector(session).list_pending_invoices()

        assert sorted(i.amount for i in invoices) == [Decimal("100"), Decimal("200")]

    def test_missing_due_date_skipped(self, session, make_invoice, captured_logs):
        make_invoice("100", status="sent", due_date=None)
        make_invoice("200", status="sent", due_date=date(2024, 3, 5))

        invoices = ObligationSelector(session).list_pending_invoices()

        assert [i.amount for i in invoices] == [Decimal("200")]
        assert any(
            r["message"] == "malformed_fact_skipped" and r["field"] == "due_date"
            for r in captured_logs()
        )

    def test_totals_include_rows_without_due_date(self, session, make_invoice):
        make_invoice("100", status="sent", due_date=None)
        make_invoice("200", status="overdue", due_date=date(2024, 2, 5))
        make_invoice("999", status="paid", due_date=date(2024, 2, 5))

        total, count = ObligationSelector(session).pending_invoice_totals()

        assert total == Decimal("300")
        assert count == 2

    def test_totals_degrade_to_zero(self, session):
        session.execute(text("DROP TABLE finance_invoices"))
        session.commit()

        assert ObligationSelector(session).pending_invoice_totals() == (Decimal("0"), 0)


class TestPendingExpenses:
    """Tests for unpaid expenses."""

    def test_one_off_only_by_default(self, session, make_expense):
        make_expense("10", status="pending", due_date=date(2024, 3, 5))
        make_expense("20", status="pending", due_date=date(2024, 3, 6), is_recurring=True)
        make_expense("30", status="paid", due_date=date(2024, 3, 7))

        selector = ObligationSelector(session)

        assert [e.amount for e in selector.list_pending_expenses()] == [Decimal("10")]
        assert sorted(
            e.amount for e in selector.list_pending_expenses(include_recurring=True)
        ) == [Decimal("10"), Decimal("20")]


class TestRecurring:
    """Tests for contracts and recurring expenses."""

    def test_active_contracts(self, session, make_contract):
        make_contract("3000", frequency="monthly")
        make_contract("1200", frequency="yearly")
        make_contract("500", frequency="monthly", status="ended")

        contracts = ObligationSelector(session).list_active_contracts()

        assert {c.frequency for c in contracts} == {
            BillingFrequency.MONTHLY,
            BillingFrequency.YEARLY,
        }
        assert len(contracts) == 2

    def test_bad_frequency_skipped(self, session, make_contract):
        make_contract("3000", frequency="weekly")
        make_contract("100", frequency="monthly")

        contracts = ObligationSelector(session).list_active_contracts()

        assert [c.amount for c in contracts] == [Decimal("100")]

    def test_recurring_expenses_exclude_cancelled(self, session, make_expense):
        make_expense("40", status="pending", due_date=date(2024, 3, 15), is_recurring=True)
        make_expense("50", status="paid", due_date=date(2024, 2, 15), is_recurring=True)
        make_expense("60", status="cancelled", due_date=date(2024, 3, 15), is_recurring=True)
        make_expense("70", status="pending", due_date=date(2024, 3, 15))

        recurring = ObligationSelector(session).list_recurring_expenses()

        assert sorted(e.amount for e in recurring) == [Decimal("40"), Decimal("50")]

    def test_recurring_without_anchor_kept(self, session, make_expense):
        make_expense("40", status="pending", due_date=None, is_recurring=True)

        recurring = ObligationSelector(session).list_recurring_expenses()

        assert recurring[0].anchor_due_date is None
