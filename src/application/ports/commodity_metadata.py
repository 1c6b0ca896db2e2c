"""Application port for commodity sector metadata."""

from typing import Protocol

from src.domain.models import CommodityMetadata


class CommodityMetadataPort(Protocol):
    """Port exposing sector metadata per commodity."""

    def fetch_metadata(self, commodity_guid: str) -> CommodityMetadata | None:
        """Return metadata for a commodity, or None when unknown."""


__all__ = ["CommodityMetadataPort"]
