"""Application ports package."""

from .commodity_metadata import CommodityMetadataPort
from .database import DatabaseEnginePort
from .ledger_repository import LedgerRepositoryPort

__all__ = [
    "CommodityMetadataPort",
    "DatabaseEnginePort",
    "LedgerRepositoryPort",
]
