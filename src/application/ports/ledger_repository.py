"""Application port for reading ledger snapshots."""

from collections.abc import Iterable
from datetime import date
from typing import Protocol

from src.domain.models import AccountDTO, CommodityRow, PriceRow, SplitRow


class LedgerRepositoryPort(Protocol):
    """Port exposing read access to accounts, splits and prices.

    Implementations return immutable rows; the valuation services never
    write back.
    """

    def fetch_base_currency(self, mnemonic: str) -> CommodityRow:
        """Return the currency commodity used for reporting.

        Args:
            mnemonic: Preferred currency mnemonic, such as ``USD``.

        Returns:
            CommodityRow: The matching currency, or the first currency by
            mnemonic when the preferred one is absent.

        Raises:
            RuntimeError: If the book defines no currency at all.
        """

    def fetch_accounts(self) -> list[AccountDTO]:
        """Return every account of the book, hidden ones included."""

    def fetch_commodities(self) -> list[CommodityRow]:
        """Return every commodity of the book."""

    def fetch_splits(
        self,
        account_guids: Iterable[str],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[SplitRow]:
        """Return splits posted to the given accounts.

        Args:
            account_guids: Accounts to read splits for.
            start_date: Optional inclusive lower bound on post date.
            end_date: Optional inclusive upper bound on post date.
        """

    def fetch_prices(
        self, commodity_guids: Iterable[str] | None = None
    ) -> list[PriceRow]:
        """Return price rows, optionally restricted to some commodities."""


__all__ = ["LedgerRepositoryPort"]
