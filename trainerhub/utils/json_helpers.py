"""
JSON utility functions for the API and the audit trail.
"""
import decimal
from datetime import date, datetime
from enum import Enum


def convert_decimal_in_dict(obj):
    """
    Recursively convert values that JSON columns cannot store natively.

    Decimals become floats, dates and datetimes ISO strings and enums their
    ``value``.

    Args:
        obj: Dictionary, list, or scalar value to process

    Returns:
        Same structure with the converted scalars
    """
    if isinstance(obj, dict):
        return {k: convert_decimal_in_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_decimal_in_dict(item) for item in obj]
    elif isinstance(obj, decimal.Decimal):
        return float(obj)
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif isinstance(obj, Enum):
        return obj.value
    return obj
