"""Settings for the valuation dashboard adapters."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import dotenv

from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root

SUPPORTED_BACKENDS = ("sqlalchemy", "piecash")
SUPPORTED_METADATA_SOURCES = ("file", "sql")


@dataclass(frozen=True)
class DashboardSettings:
    """Runtime configuration read from the environment.

    Attributes:
        backend: Ledger backend identifier (sqlalchemy or piecash).
        piecash_file: Optional path or URI to the piecash book.
        base_currency: Mnemonic of the reporting currency.
        metadata_file: Optional JSON file with commodity sector metadata.
        metadata_source: Where sector metadata comes from: ``file`` (the
            JSON file, if any) or ``sql`` (the ``commodity_metadata`` table
            next to the GnuCash schema).
    """

    backend: str = "sqlalchemy"
    piecash_file: Optional[Path | str] = None
    base_currency: str = "USD"
    metadata_file: Optional[Path] = None
    metadata_source: str = "file"

    @classmethod
    def from_env(cls) -> "DashboardSettings":
        """Build settings from environment variables and ``.env``.

        Returns:
            DashboardSettings: Settings sourced from the environment.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("GNUCASH_BACKEND", "sqlalchemy").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            logger.warning(f"Unknown GNUCASH_BACKEND={backend}")
        raw_piecash = os.getenv("PIECASH_FILE")
        if raw_piecash:
            piecash_file = cls._normalize_path(raw_piecash, logger=logger)
        else:
            piecash_file = cls._default_piecash_file(logger=logger)
        base_currency = os.getenv("BASE_CURRENCY", "USD").strip().upper() or "USD"
        raw_metadata = os.getenv("SECTOR_METADATA_FILE")
        metadata_file = None
        if raw_metadata:
            metadata_file = Path(raw_metadata).expanduser().resolve()
            if not metadata_file.exists():
                logger.warning(f"Sector metadata file does not exist at {metadata_file}")
        metadata_source = os.getenv("SECTOR_METADATA_SOURCE", "file").strip().lower()
        if metadata_source not in SUPPORTED_METADATA_SOURCES:
            logger.warning(
                f"Unknown SECTOR_METADATA_SOURCE={metadata_source}; using file"
            )
            metadata_source = "file"
        return cls(
            backend=backend,
            piecash_file=piecash_file,
            base_currency=base_currency,
            metadata_file=metadata_file,
            metadata_source=metadata_source,
        )

    @staticmethod
    def _normalize_path(raw_path: str, logger) -> Path | str:
        """Resolve a filesystem path, passing database URIs through.

        Args:
            raw_path: Raw path, ``file://`` URI or database URI.
            logger: Logger used for warnings.

        Returns:
            Path | str: Resolved path or the URI unchanged.
        """
        parsed = urlparse(raw_path)
        if parsed.scheme and parsed.scheme != "file":
            return raw_path
        if parsed.scheme == "file":
            raw_path = unquote(parsed.path)
        path = Path(raw_path).expanduser().resolve()
        if not path.exists():
            logger.warning(f"PieCash file does not exist at {path}")
        return path

    @staticmethod
    def _default_piecash_file(logger) -> Path | None:
        """Return the single ``*.gnucash`` book under ``data/``, if any."""
        data_dir = get_project_root() / "data"
        if not data_dir.exists():
            return None
        matches = sorted(data_dir.glob("*.gnucash"))
        if len(matches) == 1:
            return matches[0].resolve()
        if len(matches) > 1:
            logger.warning(
                "Multiple .gnucash files found in data/. "
                "Set PIECASH_FILE to choose one."
            )
        return None


__all__ = ["DashboardSettings", "SUPPORTED_BACKENDS", "SUPPORTED_METADATA_SOURCES"]
