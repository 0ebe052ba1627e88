"""
utils/validation_utils.py

Purpose: Input validation

- Required-field checks for request payloads
- Amount parsing for payment orders
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional


def is_blank(value: Any) -> bool:
    """
    True for None, empty strings and whitespace-only strings.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(**fields: Any) -> list:
    """
    Names of the given fields whose value is blank.

    Example:
        missing_fields(name="", email="a@x.com") -> ["name"]
    """
    return [name for name, value in fields.items() if is_blank(value)]


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parses a caller-supplied amount into a Decimal.

    Accepts ints, floats and numeric strings. Booleans, blanks, NaN and
    infinities are rejected.

    Returns:
        Decimal amount, or None if the value is not a finite number
    """
    if is_blank(value) or isinstance(value, bool):
        return None

    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None

    if not amount.is_finite():
        return None

    return amount


def to_minor_units(amount: Decimal, factor: int = 100) -> int:
    """
    Converts a major-unit amount to integer minor units (rupees -> paise).
    """
    return int((amount * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
