"""Policies deciding whether a position is still open."""

from decimal import Decimal

from src.domain.constants import CLOSED_SHARES_EPSILON, CLOSED_VALUE_EPSILON


def is_closed_position(shares: Decimal, market_value: Decimal) -> bool:
    """Return True when a position holds neither shares nor value.

    Both the share count and the market value must be negligible; a
    position with dust shares but a visible value is still open.

    Args:
        shares: Shares held.
        market_value: Market value of the shares.

    Returns:
        bool: True when the position should be hidden by default.
    """
    return abs(shares) < CLOSED_SHARES_EPSILON and abs(market_value) < CLOSED_VALUE_EPSILON


__all__ = ["is_closed_position"]
