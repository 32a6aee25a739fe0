"""
Tests for KPI helpers.

Covers:
- Inclusive window sums
- Trailing burn rate
- Monthly income/expense series
- Expenses by category
"""

from datetime import date
from decimal import Decimal

from cashflow_engines.kpis import (
    CategoryTotal,
    MonthlyTotals,
    burn_rate,
    expenses_by_category,
    income_expenses_by_month,
    sum_between,
)
from cashflow_kernel.domain.facts import SettledExpenseEvent, SettledIncomeEvent

TODAY = date(2024, 3, 1)


def _exp(amount, day, category="other"):
    return SettledExpenseEvent(Decimal(amount), day, category)


class TestSumBetween:
    """Tests for windowed sums."""

    def test_window_is_inclusive(self):
        events = [
            _exp("1", date(2024, 2, 1)),
            _exp("2", date(2024, 2, 29)),
            _exp("4", date(2024, 3, 1)),
        ]

        assert sum_between(events, date(2024, 2, 1), date(2024, 2, 29)) == Decimal("3")

    def test_empty_is_zero(self):
        assert sum_between([], date(2024, 2, 1), date(2024, 2, 29)) == Decimal("0")


class TestBurnRate:
    """Tests for the trailing burn rate."""

    def test_average_over_three_months(self):
        """Settled expenses in [today - 3 months, today] divided by three."""
        expenses = [
            _exp("300", date(2023, 12, 1)),   # window start, included
            _exp("600", date(2024, 1, 15)),
            _exp("300", date(2024, 3, 1)),    # today, included
            _exp("999", date(2023, 11, 30)),  # before window
            _exp("999", date(2024, 3, 2)),    # after today
        ]

        assert burn_rate(expenses, TODAY) == Decimal("400")

    def test_custom_months(self):
        expenses = [_exp("600", date(2024, 2, 15))]

        assert burn_rate(expenses, TODAY, months=6) == Decimal("100")

    def test_no_expenses(self):
        assert burn_rate([], TODAY) == Decimal("0")

    def test_non_positive_months(self):
        assert burn_rate([_exp("300", TODAY)], TODAY, months=0) == Decimal("0")


class TestIncomeExpensesByMonth:
    """Tests for the monthly series."""

    def test_zero_filled_and_sorted(self):
        income = [SettledIncomeEvent(Decimal("100"), date(2024, 1, 20))]
        expenses = [_exp("40", date(2023, 11, 3)), _exp("10", date(2024, 1, 2))]

        rows = income_expenses_by_month(income, expenses, date(2023, 11, 1), date(2024, 2, 29))

        assert rows == [
            MonthlyTotals(date(2023, 11, 1), Decimal("0"), Decimal("40")),
            MonthlyTotals(date(2023, 12, 1), Decimal("0"), Decimal("0")),
            MonthlyTotals(date(2024, 1, 1), Decimal("100"), Decimal("10")),
            MonthlyTotals(date(2024, 2, 1), Decimal("0"), Decimal("0")),
        ]
        assert rows[2].net == Decimal("90")

    def test_events_outside_range_ignored(self):
        income = [SettledIncomeEvent(Decimal("100"), date(2024, 3, 5))]

        rows = income_expenses_by_month(income, [], date(2024, 2, 1), date(2024, 2, 29))

        assert rows == [MonthlyTotals(date(2024, 2, 1), Decimal("0"), Decimal("0"))]


class TestExpensesByCategory:
    """Tests for category totals."""

    def test_sorted_by_amount_descending(self):
        expenses = [
            _exp("50", date(2024, 2, 1), "software"),
            _exp("200", date(2024, 2, 2), "rent"),
            _exp("70", date(2024, 2, 3), "software"),
        ]

        rows = expenses_by_category(expenses, date(2024, 2, 1), date(2024, 2, 29))

        assert rows == [
            CategoryTotal("rent", Decimal("200")),
            CategoryTotal("software", Decimal("120")),
        ]

    def test_missing_category_is_other(self):
        expenses = [_exp("5", date(2024, 2, 1), "")]

        rows = expenses_by_category(expenses, date(2024, 2, 1), date(2024, 2, 29))

        assert rows == [CategoryTotal("other", Decimal("5"))]
