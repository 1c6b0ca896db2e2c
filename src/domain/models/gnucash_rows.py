"""Domain models for GnuCash row data."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CommodityRow:
    """Row representing a commodity (currency or security)."""

    guid: str
    namespace: str | None
    mnemonic: str | None
    fullname: str | None = None
    fraction: int = 100


@dataclass(frozen=True)
class SplitRow:
    """Row representing one leg of a posted transaction.

    ``value`` is expressed in the transaction currency and ``quantity`` in the
    account commodity; both are kept as integer fractions.
    """

    tx_guid: str | None
    account_guid: str
    value_num: int
    value_denom: int
    quantity_num: int
    quantity_denom: int
    post_date: date | None


@dataclass(frozen=True)
class PriceRow:
    """Row representing a commodity price quoted in a currency."""

    commodity_guid: str
    currency_guid: str | None
    value_num: int
    value_denom: int
    date: date


__all__ = ["CommodityRow", "SplitRow", "PriceRow"]
