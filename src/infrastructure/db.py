"""Database infrastructure for the valuation dashboard.

This module creates and reuses the SQLAlchemy engine connected to the
GnuCash database. Configuration comes from the environment, optionally
seeded from a ``.env`` file.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from src.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create the engine for a GnuCash SQL book.

    Server databases get a small health-checked pool. SQLite books are
    shared across Streamlit script threads, so the thread check is off.

    Args:
        db_url: Fully qualified database URL.

    Returns:
        Engine: Configured SQLAlchemy engine.
    """
    if make_url(db_url).get_backend_name() == "sqlite":
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            future=True,
        )
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_gnucash_engine: Optional[Engine] = None


def get_gnucash_engine() -> Engine:
    """Return the lazily created engine for ``GNUCASH_DB_URL``."""
    global _gnucash_engine
    if _gnucash_engine is None:
        _gnucash_engine = _create_engine(_get_env_var("GNUCASH_DB_URL"))
    return _gnucash_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by the module engine."""

    def get_gnucash_engine(self) -> Engine:
        return get_gnucash_engine()


__all__ = ["get_gnucash_engine", "SqlAlchemyDatabaseEngineAdapter"]
