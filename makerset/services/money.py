"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

Number = Union[str, int, float, Decimal, None]


def parse_decimal(value: Number) -> Optional[Decimal]:
    """
    Parse a value as Decimal, returning None when it is missing or malformed.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal value, or None if the value is None, blank, or not a finite number
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # Convert floats via string to avoid binary precision artifacts
            if isinstance(value, float):
                result = Decimal(str(value))
            else:
                result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return None

    if not result.is_finite():
        return None
    return result


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    result = parse_decimal(value)
    return result if result is not None else Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON payloads.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def add(a: Number, b: Number) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)
