"""
Due date calculation for billing periods.
"""
import calendar

from trainerhub.models.enums import BillingPeriod


def add_months(start, months):
    """
    Add calendar months to a date, clamping to the last day of the target month.

    Jan 31 + 1 month is Feb 28 (or 29), and Feb 29 + 12 months is Feb 28
    in a non-leap year.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def next_due_date(start_date, period):
    """
    Compute when the period starting at ``start_date`` expires.

    Args:
        start_date (date): First day of the period
        period (BillingPeriod): Billing period

    Returns:
        date or None: None for lifetime subscriptions and for no plan
    """
    if period is BillingPeriod.MONTHLY:
        return add_months(start_date, 1)
    if period is BillingPeriod.ANNUAL:
        return add_months(start_date, 12)
    return None
