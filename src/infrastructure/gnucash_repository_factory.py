"""Factory helpers to select the ledger repository backend."""

from pathlib import Path

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.infrastructure.gnucash_repository import SqlAlchemyLedgerRepository
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.piecash_repository import PieCashLedgerRepository
from src.infrastructure.settings import DashboardSettings


def create_ledger_repository(
    db_port: DatabaseEnginePort,
    logger=None,
    settings: DashboardSettings | None = None,
) -> LedgerRepositoryPort:
    """Return a ledger repository implementation based on configuration.

    Args:
        db_port: Port providing access to the GnuCash engine (SQL backend).
        logger: Optional logger compatible with logging.Logger-like API.
        settings: Optional settings; read from the environment when omitted.

    Returns:
        LedgerRepositoryPort: Concrete repository implementation.

    Raises:
        RuntimeError: If the piecash backend has no book configured.
        ValueError: If the backend is not supported.
    """
    resolved_logger = logger or get_app_logger()
    resolved_settings = settings or DashboardSettings.from_env()
    backend = resolved_settings.backend

    if backend == "sqlalchemy":
        return SqlAlchemyLedgerRepository(db_port, logger=resolved_logger)

    if backend == "piecash":
        book = resolved_settings.piecash_file
        if book is None:
            raise RuntimeError("PieCash backend requires a PIECASH_FILE path.")
        if isinstance(book, Path) and not book.exists():
            resolved_logger.warning(f"PieCash file does not exist at {book}")
        return PieCashLedgerRepository(book, logger=resolved_logger)

    raise ValueError(
        f"Unsupported GnuCash backend: {backend}. Expected sqlalchemy or piecash."
    )


__all__ = ["create_ledger_repository"]
