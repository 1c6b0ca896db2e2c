"""Use case to compute the portfolio value history."""

from collections.abc import Iterable
from datetime import date, timedelta

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.ledger_data import LedgerReader
from src.domain.models import PortfolioValuePoint
from src.domain.services import CurrencyConverter, LedgerScope, ValuationEngine
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import round_money


class GetInvestmentHistoryUseCase:
    """Value investment accounts at every price date of a window.

    Shares are counted as of each date and priced with the newest known
    price, so values move both with trades and with prices.
    """

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        logger=None,
        base_currency: str = "USD",
    ) -> None:
        self._logger = logger or get_app_logger()
        self._reader = LedgerReader(ledger_repository, self._logger)
        self._base_currency = base_currency

    def execute(
        self,
        days: int = 365,
        account_guids: Iterable[str] | None = None,
        end_date: date | None = None,
    ) -> list[PortfolioValuePoint]:
        """Return positive portfolio values, oldest first.

        Args:
            days: Length of the look-back window.
            account_guids: Restrict to these investment accounts.
            end_date: Last day of the window; defaults to today.

        Returns:
            list[PortfolioValuePoint]: One point per price date.
        """
        end = end_date or date.today()
        start = end - timedelta(days=days)
        reference = self._reader.load_reference(self._base_currency)
        scope = LedgerScope.from_accounts(
            reference.accounts, reference.commodities, include_hidden=True
        ).investments_only()
        if account_guids is not None:
            wanted = set(account_guids)
            scope = LedgerScope(
                investment_accounts=scope.investment_accounts & wanted,
                account_commodity={
                    guid: commodity
                    for guid, commodity in scope.account_commodity.items()
                    if guid in wanted
                },
            )

        commodity_guids = set(scope.account_commodity.values())
        oracle = self._reader.price_oracle(commodity_guids)
        date_points = [
            point for point in oracle.price_dates(commodity_guids) if start <= point <= end
        ]
        splits = self._reader.fetch_splits(scope.investment_accounts, end_date=end)
        engine = ValuationEngine(
            scope,
            reference.base_currency.guid,
            oracle,
            CurrencyConverter(reference.base_currency.guid),
            self._logger,
        )
        history = [
            PortfolioValuePoint(snapshot.date, round_money(snapshot.investment_value))
            for snapshot in engine.snapshots(splits, date_points)
            if snapshot.investment_value > 0
        ]
        self._logger.info(
            f"Portfolio history computed: {len(history)} points from {start} to {end}"
        )
        return history


__all__ = ["GetInvestmentHistoryUseCase"]
