"""
Unit tests for due date calculation.
"""
from datetime import date, timedelta

import pytest

from trainerhub.models import BillingPeriod
from trainerhub.services.periods import add_months, next_due_date


@pytest.mark.parametrize("start, expected", [
    (date(2024, 1, 15), date(2024, 2, 15)),
    (date(2024, 1, 31), date(2024, 2, 29)),
    (date(2023, 1, 31), date(2023, 2, 28)),
    (date(2024, 3, 31), date(2024, 4, 30)),
    (date(2024, 12, 10), date(2025, 1, 10)),
    (date(2024, 12, 31), date(2025, 1, 31)),
])
def test_monthly_due_date(start, expected):
    """Test monthly periods end in the following calendar month."""
    assert next_due_date(start, BillingPeriod.MONTHLY) == expected


def test_monthly_due_date_always_in_next_month():
    """Test every day of a leap year lands in the next calendar month."""
    start = date(2024, 1, 1)
    while start.year == 2024:
        due = next_due_date(start, BillingPeriod.MONTHLY)
        assert (due.year * 12 + due.month) - (start.year * 12 + start.month) == 1
        start += timedelta(days=1)


@pytest.mark.parametrize("start, expected", [
    (date(2024, 1, 15), date(2025, 1, 15)),
    (date(2024, 2, 29), date(2025, 2, 28)),
    (date(2023, 6, 30), date(2024, 6, 30)),
])
def test_annual_due_date(start, expected):
    assert next_due_date(start, BillingPeriod.ANNUAL) == expected


@pytest.mark.parametrize("period", [BillingPeriod.LIFETIME, BillingPeriod.NONE])
def test_no_due_date_without_recurrence(period):
    assert next_due_date(date(2024, 1, 15), period) is None


def test_add_months_handles_multiple_years():
    assert add_months(date(2024, 11, 30), 27) == date(2027, 2, 28)
