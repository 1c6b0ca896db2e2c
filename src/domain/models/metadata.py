"""Domain models for commodity classification metadata."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class SectorWeight:
    """Share of a commodity attributed to one sector, in percent."""

    sector: str
    weight: Decimal


@dataclass(frozen=True)
class CommodityMetadata:
    """Sector information for a commodity.

    Attributes:
        commodity_guid: Commodity the metadata describes.
        sector: Single sector for individual stocks.
        sector_weights: Sector split for funds, weights in percent.
        industry: Optional industry label.
        asset_class: Optional asset class (stock, etf, ...).
        last_updated: When the entry was refreshed, if known.
    """

    commodity_guid: str
    sector: str | None = None
    sector_weights: tuple[SectorWeight, ...] = field(default_factory=tuple)
    industry: str | None = None
    asset_class: str | None = None
    last_updated: datetime | None = None


__all__ = ["SectorWeight", "CommodityMetadata"]
