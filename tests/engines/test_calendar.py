"""Tests for calendar helpers."""

from datetime import date

from cashflow_engines.calendar import (
    add_months,
    iter_days,
    iter_month_starts,
    last_of_month,
    month_range,
    months_between,
)


class TestMonthArithmetic:
    """Tests for month stepping and boundaries."""

    def test_add_months_clamps_to_month_end(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_add_months_is_anchored(self):
        """Counting from the anchor restores the 31st after a short month."""
        anchor = date(2024, 1, 31)

        assert add_months(anchor, 2) == date(2024, 3, 31)

    def test_add_negative_months(self):
        assert add_months(date(2024, 3, 1), -3) == date(2023, 12, 1)

    def test_last_of_month(self):
        assert last_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
        assert last_of_month(date(2024, 12, 31)) == date(2024, 12, 31)

    def test_month_range_previous_month(self):
        assert month_range(date(2024, 3, 10), -1) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_month_range_across_year(self):
        assert month_range(date(2024, 1, 15), -1) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_months_between(self):
        assert months_between(date(2023, 6, 30), date(2024, 3, 1)) == 9
        assert months_between(date(2024, 3, 1), date(2024, 1, 1)) == -2


class TestIteration:
    """Tests for day and month iteration."""

    def test_iter_days(self):
        days = list(iter_days(date(2024, 2, 28), 3))

        assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_iter_days_zero(self):
        assert list(iter_days(date(2024, 2, 28), 0)) == []

    def test_iter_month_starts(self):
        months = list(iter_month_starts(date(2023, 11, 15), date(2024, 2, 1)))

        assert months == [date(2023, 11, 1), date(2023, 12, 1), date(2024, 1, 1), date(2024, 2, 1)]
