"""Shared ledger loading for the valuation use cases."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date

from src.application.errors import LedgerUnavailableError
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.models import AccountDTO, CommodityRow, PriceRow, SplitRow
from src.domain.services import CurrencyConverter, PriceOracle


@dataclass(frozen=True)
class LedgerReference:
    """Reference data fetched once per request."""

    base_currency: CommodityRow
    accounts: list[AccountDTO]
    commodities: list[CommodityRow]

    @property
    def currency_code(self) -> str:
        return self.base_currency.mnemonic or ""

    def commodities_by_guid(self) -> dict[str, CommodityRow]:
        return {commodity.guid: commodity for commodity in self.commodities}


class LedgerReader:
    """Read ledger data, turning repository failures into one error type."""

    def __init__(self, repository: LedgerRepositoryPort, logger) -> None:
        """Initialize the reader.

        Args:
            repository: Port providing ledger rows.
            logger: Logger compatible with logging.Logger-like API.
        """
        self._repository = repository
        self._logger = logger

    def _call(self, description: str, func: Callable, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LedgerUnavailableError:
            raise
        except Exception as exc:
            self._logger.error(f"Failed to fetch {description}: {exc}")
            raise LedgerUnavailableError(
                f"Ledger data unavailable while fetching {description}"
            ) from exc

    def load_reference(self, base_currency: str) -> LedgerReference:
        """Fetch the base currency, accounts and commodities.

        Raises:
            LedgerUnavailableError: If the repository fails or the book has
                no accounts.
        """
        currency = self._call(
            "base currency", self._repository.fetch_base_currency, base_currency
        )
        accounts = self._call("accounts", self._repository.fetch_accounts)
        if not accounts:
            raise LedgerUnavailableError("Ledger has no accounts")
        commodities = self._call("commodities", self._repository.fetch_commodities)
        self._logger.info(
            f"Loaded {len(accounts)} accounts and {len(commodities)} commodities "
            f"(base currency {currency.mnemonic})"
        )
        return LedgerReference(currency, list(accounts), list(commodities))

    def fetch_splits(
        self,
        account_guids: Iterable[str],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[SplitRow]:
        guids = sorted(set(account_guids))
        if not guids:
            return []
        splits = self._call(
            "splits", self._repository.fetch_splits, guids, start_date, end_date
        )
        self._logger.info(f"Fetched {len(splits)} splits for {len(guids)} accounts")
        return list(splits)

    def fetch_prices(self, commodity_guids: Iterable[str]) -> list[PriceRow]:
        guids = sorted(set(commodity_guids))
        if not guids:
            return []
        prices = self._call("prices", self._repository.fetch_prices, guids)
        self._logger.info(f"Fetched {len(prices)} prices for {len(guids)} commodities")
        return list(prices)

    def price_oracle(self, commodity_guids: Iterable[str]) -> PriceOracle:
        """Build a price oracle for the given commodities."""
        return PriceOracle.from_price_rows(self.fetch_prices(commodity_guids), self._logger)

    def currency_converter(
        self, reference: LedgerReference, currency_guids: Iterable[str | None]
    ) -> CurrencyConverter:
        """Build a converter for the foreign currencies among ``currency_guids``."""
        base_guid = reference.base_currency.guid
        foreign = {guid for guid in currency_guids if guid and guid != base_guid}
        if not foreign:
            return CurrencyConverter(base_guid, logger=self._logger)
        rows = self.fetch_prices(foreign | {base_guid})
        return CurrencyConverter.from_price_rows(base_guid, rows, foreign, self._logger)


__all__ = ["LedgerReference", "LedgerReader"]
