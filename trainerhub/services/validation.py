"""
Input coercion shared by the services.

Each helper accepts the already-typed value or its JSON representation and
raises ``ValidationFailed`` naming the offending field.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from .errors import ValidationFailed

# Scale of the Numeric price and discount columns
DECIMAL_PLACES = 2


def coerce_enum(enum_cls, value, field):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise ValidationFailed(f"{field} must be one of {allowed}", field=field, value=value)


def coerce_decimal(value, field, allow_none=False, places=None):
    """
    Parse a finite Decimal.

    With ``places`` set, values carrying more decimal places than the column
    stores are rejected rather than rounded on write.
    """
    if value is None and allow_none:
        return None
    if isinstance(value, bool) or value is None:
        raise ValidationFailed(f"{field} must be a number", field=field, value=value)
    try:
        # str() first so floats like 0.1 keep their printed value
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationFailed(f"{field} must be a number", field=field, value=value)
    if not number.is_finite():
        raise ValidationFailed(f"{field} must be a finite number", field=field, value=str(number))
    if places is not None and number.normalize().as_tuple().exponent < -places:
        raise ValidationFailed(f"{field} must have at most {places} decimal places",
                               field=field, value=str(number))
    return number


def coerce_int(value, field):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationFailed(f"{field} must be an integer", field=field, value=value)
    return value


def coerce_bool(value, field):
    if not isinstance(value, bool):
        raise ValidationFailed(f"{field} must be a boolean", field=field, value=value)
    return value


def coerce_date(value, field):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ValidationFailed(f"{field} must be an ISO date (YYYY-MM-DD)", field=field, value=value)


def coerce_discount(value, field='discount_percent'):
    """Discount percentages must lie in [0, 100] with cent precision; they are never clamped."""
    discount = coerce_decimal(0 if value is None else value, field, places=DECIMAL_PLACES)
    if discount < 0 or discount > 100:
        raise ValidationFailed(f"{field} must be between 0 and 100", field=field, value=discount)
    return discount


def coerce_optional_text(value, field, max_length):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailed(f"{field} must be a string", field=field)
    value = value.strip()
    if len(value) > max_length:
        raise ValidationFailed(f"{field} must be at most {max_length} characters",
                               field=field, max_length=max_length)
    return value or None
