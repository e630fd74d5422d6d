"""
Pricing rules: base price selection and discounted final price.

Both functions are pure; they never touch the database.
"""
from decimal import ROUND_HALF_UP, Decimal

from trainerhub.models.enums import BillingPeriod

from .errors import ValidationFailed
from .validation import coerce_decimal, coerce_discount

# Currency minor unit
PRICE_QUANTUM = Decimal('0.01')
MONTHS_PER_YEAR = 12


def quantize_price(amount):
    """Round an amount to the currency minor unit, half-up."""
    return amount.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def compute_final_price(base_price, discount_percent):
    """
    Apply a percentage discount to a base price.

    Args:
        base_price: Price before discount, >= 0
        discount_percent: Discount in [0, 100]; out-of-range values raise
            ``ValidationFailed`` instead of being clamped

    Returns:
        Decimal: ``base_price * (1 - discount_percent / 100)`` rounded half-up
        to the minor unit
    """
    base = coerce_decimal(base_price, 'base_price')
    if base < 0:
        raise ValidationFailed("base_price must not be negative", field='base_price', value=base)
    discount = coerce_discount(discount_percent)
    return quantize_price(base * (Decimal(100) - discount) / Decimal(100))


def select_base_price(plan, period):
    """
    Pick the price a plan charges for a billing period.

    Args:
        plan: Plan with ``monthly_price`` and optional ``annual_price``
        period (BillingPeriod): Billing period

    Returns:
        Decimal: Base price before discount

    Raises:
        ValueError: For ``BillingPeriod.NONE``; callers must not price a
            subscription without a plan.
    """
    if period is BillingPeriod.MONTHLY:
        return coerce_decimal(plan.monthly_price, 'monthly_price')
    if period is BillingPeriod.ANNUAL:
        if plan.annual_price is not None:
            return coerce_decimal(plan.annual_price, 'annual_price')
        return coerce_decimal(plan.monthly_price, 'monthly_price') * MONTHS_PER_YEAR
    if period is BillingPeriod.LIFETIME:
        return Decimal('0')
    raise ValueError(f"Cannot price billing period {period!r}")
