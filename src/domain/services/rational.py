"""Exact fraction helpers for GnuCash numerator/denominator pairs."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from fractions import Fraction

from src.utils.decimal_utils import coerce_decimal


def _as_integer(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        candidate = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not candidate.is_finite() or candidate != candidate.to_integral_value():
        return None
    return int(candidate)


def rational_to_fraction(num, denom) -> Fraction:
    """Return the exact fraction for a numerator/denominator pair.

    A zero or malformed denominator resolves to zero.
    """
    numerator = _as_integer(num)
    denominator = _as_integer(denom)
    if numerator is None or not denominator:
        return Fraction(0)
    return Fraction(numerator, denominator)


def rational_to_decimal(num, denom) -> Decimal:
    """Convert a numerator/denominator pair to Decimal.

    Args:
        num: Integer numerator, possibly larger than 64 bits.
        denom: Integer denominator.

    Returns:
        Decimal: ``num / denom``, or zero when the denominator is zero or
        either part is not an integer.
    """
    numerator = _as_integer(num)
    denominator = _as_integer(denom)
    if numerator is None or not denominator:
        return Decimal("0")
    digits = len(str(abs(numerator))) + len(str(abs(denominator)))
    with localcontext() as ctx:
        ctx.prec = max(28, digits + 10)
        return Decimal(numerator) / Decimal(denominator)


def format_rational(num, denom) -> str:
    """Render a fraction as a fixed-point decimal string.

    The number of fractional digits follows the denominator: a denominator
    of 100 gives two digits, 1000 gives three. Whole amounts are rendered
    without a fractional part.

    Args:
        num: Integer numerator.
        denom: Integer denominator.

    Returns:
        str: Decimal representation such as ``"1.50"`` or ``"-0.50"``.
    """
    numerator = _as_integer(num)
    denominator = _as_integer(denom)
    if numerator is None or not denominator:
        return "0"
    negative = (numerator < 0) != (denominator < 0)
    numerator = abs(numerator)
    denominator = abs(denominator)
    integer_part, remainder = divmod(numerator, denominator)
    digits = len(str(denominator)) - 1
    sign = "-" if negative and (integer_part or remainder) else ""
    if digits <= 0 or not remainder:
        return f"{sign}{integer_part}"
    fractional = remainder * 10**digits // denominator
    return f"{sign}{integer_part}.{str(fractional).zfill(digits)}"


def decimal_to_rational(value, denom: int = 100) -> tuple[int, int]:
    """Convert a decimal amount to a numerator over ``denom``.

    Args:
        value: Amount to convert.
        denom: Target denominator, typically the commodity fraction.

    Returns:
        tuple[int, int]: Numerator rounded half-up, and the denominator.
    """
    scaled = coerce_decimal(value) * Decimal(denom)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP)), denom


def sum_rationals(pairs) -> Fraction:
    """Return the exact sum of numerator/denominator pairs."""
    total = Fraction(0)
    for num, denom in pairs:
        total += rational_to_fraction(num, denom)
    return total


__all__ = [
    "rational_to_fraction",
    "rational_to_decimal",
    "format_rational",
    "decimal_to_rational",
    "sum_rationals",
]
