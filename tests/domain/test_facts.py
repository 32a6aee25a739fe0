"""
Tests for fact coercion at the upstream boundary.

Covers:
- Amount and date coercion
- Per-stream row validation
- Malformed rows raising MalformedFactError
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from cashflow_kernel.domain.facts import (
    BillingFrequency,
    ExpenseStatus,
    InvoiceStatus,
    coerce_amount,
    coerce_contract,
    coerce_date,
    coerce_pending_expense,
    coerce_pending_invoice,
    coerce_recurring_expense,
    coerce_settled_expense,
    coerce_settled_income,
)
from cashflow_kernel.exceptions import MalformedFactError


class TestCoerceAmount:
    """Tests for amount coercion."""

    @pytest.mark.parametrize("raw,expected", [
        (Decimal("10.50"), Decimal("10.50")),
        ("10.50", Decimal("10.50")),
        (" 7 ", Decimal("7")),
        (3, Decimal("3")),
        (0.1, Decimal("0.1")),
        ("-4.2", Decimal("-4.2")),
    ])
    def test_valid(self, raw, expected):
        assert coerce_amount(raw, "test") == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", True, "NaN", "Infinity"])
    def test_invalid(self, raw):
        with pytest.raises(MalformedFactError) as exc_info:
            coerce_amount(raw, "test")

        assert exc_info.value.code == "MALFORMED_FACT"
        assert exc_info.value.field == "amount"


class TestCoerceDate:
    """Tests for date coercion."""

    def test_date_passthrough(self):
        assert coerce_date(date(2024, 3, 1), "test", "d") == date(2024, 3, 1)

    def test_datetime_truncated(self):
        value = datetime(2024, 3, 1, 23, 59, tzinfo=timezone.utc)

        assert coerce_date(value, "test", "d") == date(2024, 3, 1)

    def test_iso_string(self):
        assert coerce_date("2024-03-01T10:00:00Z", "test", "d") == date(2024, 3, 1)

    @pytest.mark.parametrize("raw", [None, "", "03/01/2024", 20240301])
    def test_invalid(self, raw):
        with pytest.raises(MalformedFactError):
            coerce_date(raw, "test", "d")


class TestRowCoercion:
    """Tests for per-stream row validation."""

    def test_settled_income(self):
        fact = coerce_settled_income({"amount": "500", "issue_date": "2024-02-29"})

        assert fact.amount == Decimal("500")
        assert fact.settled_date == date(2024, 2, 29)

    def test_settled_expense_defaults_category(self):
        fact = coerce_settled_expense({"amount": "20", "date": date(2024, 2, 1), "category": None})

        assert fact.category == "other"

    def test_pending_invoice(self):
        fact = coerce_pending_invoice(
            {"amount": "200", "due_date": "2024-03-06", "status": "overdue"}
        )

        assert fact.status is InvoiceStatus.OVERDUE
        assert fact.due_date == date(2024, 3, 6)

    def test_pending_invoice_without_due_date_is_malformed(self):
        with pytest.raises(MalformedFactError) as exc_info:
            coerce_pending_invoice({"amount": "200", "due_date": None, "status": "sent"})

        assert exc_info.value.field == "due_date"

    def test_paid_invoice_is_not_pending(self):
        with pytest.raises(MalformedFactError):
            coerce_pending_invoice({"amount": "200", "due_date": "2024-03-06", "status": "paid"})

    def test_pending_expense(self):
        fact = coerce_pending_expense(
            {"amount": "75", "due_date": "2024-03-10", "is_recurring": True}
        )

        assert fact.recurring is True
        assert fact.status is ExpenseStatus.PENDING

    def test_contract_frequency(self):
        fact = coerce_contract({"amount": "1200", "frequency": "Yearly"})

        assert fact.frequency is BillingFrequency.YEARLY
        assert fact.monthly_amount == Decimal("100")

    def test_contract_unknown_frequency_is_malformed(self):
        with pytest.raises(MalformedFactError) as exc_info:
            coerce_contract({"amount": "1200", "frequency": "weekly"})

        assert exc_info.value.field == "frequency"

    def test_recurring_expense_anchor_optional(self):
        fact = coerce_recurring_expense({"amount": "30", "due_date": None, "status": "pending"})

        assert fact.anchor_due_date is None
