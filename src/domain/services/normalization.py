"""Commodity naming rules shared by the valuation services.

Older GnuCash books store currencies under the ``ISO4217`` namespace
instead of ``CURRENCY``; both are treated as currencies.
"""

from src.domain.constants import CURRENCY_NAMESPACE
from src.domain.models import CommodityRow

_LEGACY_CURRENCY_NAMESPACES = frozenset({"ISO4217"})


def normalize_namespace(namespace: str | None) -> str | None:
    """Return the upper-cased namespace, folding legacy currency names.

    Args:
        namespace: Raw namespace value from a repository.

    Returns:
        str | None: ``CURRENCY`` for currency namespaces, the cleaned
        namespace otherwise, or None when blank.
    """
    cleaned = (namespace or "").strip().upper()
    if not cleaned:
        return None
    if cleaned in _LEGACY_CURRENCY_NAMESPACES:
        return CURRENCY_NAMESPACE
    return cleaned


def normalize_mnemonic(mnemonic: str | None) -> str | None:
    cleaned = (mnemonic or "").strip().upper()
    return cleaned or None


def is_currency(commodity: CommodityRow | None) -> bool:
    """Return whether a commodity is a currency rather than a security."""
    if commodity is None:
        return False
    return normalize_namespace(commodity.namespace) == CURRENCY_NAMESPACE


def commodity_symbol(commodity: CommodityRow | None) -> str:
    """Return the display ticker, falling back to the full name."""
    if commodity is None:
        return ""
    return (
        normalize_mnemonic(commodity.mnemonic)
        or (commodity.fullname or "").strip()
    )


__all__ = [
    "commodity_symbol",
    "is_currency",
    "normalize_mnemonic",
    "normalize_namespace",
]
