"""Database ports for the valuation dashboard.

This module defines the application-layer protocol for accessing the
GnuCash database engine. Infrastructure implementations provide the
concrete adapter.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the database engine holding the GnuCash book.

    Repositories depend on this protocol instead of concrete database
    drivers or configuration details.
    """

    def get_gnucash_engine(self) -> Engine:
        """Get the engine for the GnuCash database.

        Returns:
            Engine: SQLAlchemy engine connected to the GnuCash backend.
        """


__all__ = ["DatabaseEnginePort"]
