"""Commodity sector metadata sources."""

import json
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from sqlalchemy import text

from src.application.ports.commodity_metadata import CommodityMetadataPort
from src.application.ports.database import DatabaseEnginePort
from src.domain.models import CommodityMetadata, SectorWeight
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import coerce_decimal


def parse_sector_weights(raw) -> tuple[SectorWeight, ...]:
    """Parse sector weights from a mapping, a list of pairs or JSON text.

    Args:
        raw: ``{"Technology": 28.5}``, ``[{"sector": ..., "weight": ...}]``
            or the JSON encoding of either.

    Returns:
        tuple[SectorWeight, ...]: Weights in percent, input order kept.
    """
    if raw is None or raw == "":
        return ()
    if isinstance(raw, (str, bytes)):
        raw = json.loads(raw)
    if isinstance(raw, Mapping):
        items = raw.items()
    else:
        items = ((entry["sector"], entry["weight"]) for entry in raw)
    return tuple(
        SectorWeight(sector=str(sector), weight=coerce_decimal(weight))
        for sector, weight in items
    )


def parse_metadata_entry(commodity_guid: str, payload: Mapping) -> CommodityMetadata:
    """Build metadata from a JSON-like mapping."""
    last_updated = payload.get("last_updated")
    if isinstance(last_updated, str):
        last_updated = datetime.fromisoformat(last_updated)
    return CommodityMetadata(
        commodity_guid=commodity_guid,
        sector=payload.get("sector") or None,
        sector_weights=parse_sector_weights(payload.get("sector_weights")),
        industry=payload.get("industry") or None,
        asset_class=payload.get("asset_class") or None,
        last_updated=last_updated,
    )


class InMemoryCommodityMetadataCache(CommodityMetadataPort):
    """Metadata held in memory and injected where needed.

    Writes are last-write-wins; entries are pure data so concurrent writers
    store the same values.
    """

    def __init__(self, entries: Mapping[str, CommodityMetadata] | None = None) -> None:
        self._entries: dict[str, CommodityMetadata] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def fetch_metadata(self, commodity_guid: str) -> CommodityMetadata | None:
        return self._entries.get(commodity_guid)

    def store(self, metadata: CommodityMetadata) -> None:
        """Insert or replace the entry for ``metadata.commodity_guid``."""
        self._entries[metadata.commodity_guid] = metadata

    @classmethod
    def from_json_file(cls, path: Path, logger=None) -> "InMemoryCommodityMetadataCache":
        """Load entries keyed by commodity GUID from a JSON file.

        Entries that cannot be parsed are skipped with a warning. An
        unreadable file, invalid JSON or a non-object payload yields an
        empty cache so only sector exposure degrades.

        Args:
            path: JSON file mapping commodity GUIDs to metadata objects.
            logger: Optional logger for skipped entries.

        Returns:
            InMemoryCommodityMetadataCache: Cache holding the parsed entries.
        """
        resolved_logger = logger or get_app_logger()
        cache = cls()
        try:
            with Path(path).open(encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            resolved_logger.warning(f"Cannot read sector metadata from {path}: {exc}")
            return cache
        if not isinstance(payload, Mapping):
            resolved_logger.warning(
                f"Sector metadata in {path} must be a JSON object keyed by commodity GUID"
            )
            return cache
        for commodity_guid, entry in payload.items():
            try:
                cache.store(parse_metadata_entry(commodity_guid, entry))
            except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as exc:
                resolved_logger.warning(f"Skipping metadata for {commodity_guid}: {exc}")
        resolved_logger.info(f"Loaded sector metadata for {len(cache)} commodities from {path}")
        return cache


class SqlAlchemyCommodityMetadataRepository(CommodityMetadataPort):
    """Metadata read from a ``commodity_metadata`` table."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        self._db_port = db_port

    def fetch_metadata(self, commodity_guid: str) -> CommodityMetadata | None:
        query = text(
            """
            SELECT commodity_guid, sector, industry, sector_weights,
                   asset_class, last_updated
            FROM commodity_metadata
            WHERE commodity_guid = :commodity_guid
            LIMIT 1
            """
        )
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            row = conn.execute(query, {"commodity_guid": commodity_guid}).first()
        if row is None:
            return None
        return CommodityMetadata(
            commodity_guid=row.commodity_guid,
            sector=row.sector or None,
            sector_weights=parse_sector_weights(row.sector_weights),
            industry=row.industry or None,
            asset_class=row.asset_class or None,
            last_updated=row.last_updated,
        )


__all__ = [
    "parse_sector_weights",
    "parse_metadata_entry",
    "InMemoryCommodityMetadataCache",
    "SqlAlchemyCommodityMetadataRepository",
]
