"""Helpers for Decimal normalization."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value, places: int = 2) -> Decimal:
    """Round a value half-up to a fixed number of decimal places.

    Args:
        value: Numeric value to round.
        places: Number of decimal places to keep.

    Returns:
        Decimal: Rounded value.
    """
    exponent = Decimal(1).scaleb(-places)
    return coerce_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def round_money(value) -> Decimal:
    """Round a monetary value to cents."""
    return coerce_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


__all__ = ["CENT", "coerce_decimal", "quantize", "round_money"]
