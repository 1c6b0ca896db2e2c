"""Use case to compute the monthly net worth time series."""

from datetime import date, timedelta

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.ledger_data import LedgerReader
from src.domain.models import NetWorthTimeSeries
from src.domain.services import LedgerScope, ValuationEngine
from src.infrastructure.logging.logger import get_app_logger
from src.utils.date_utils import generate_monthly_date_points


class GetNetWorthTimeSeriesUseCase:
    """Value the ledger at every month end of a reporting window."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        logger=None,
        base_currency: str = "USD",
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port providing ledger rows.
            logger: Optional logger compatible with logging.Logger-like API.
            base_currency: Mnemonic of the reporting currency.
        """
        self._logger = logger or get_app_logger()
        self._reader = LedgerReader(ledger_repository, self._logger)
        self._base_currency = base_currency

    def execute(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> NetWorthTimeSeries:
        """Return net worth, assets and liabilities per month end.

        Args:
            start_date: First day of the window; defaults to the first
                posted split, or one year before ``end_date``.
            end_date: Last day of the window; defaults to today.

        Returns:
            NetWorthTimeSeries: Points rounded to cents, oldest first.
        """
        reference = self._reader.load_reference(self._base_currency)
        scope = LedgerScope.from_accounts(reference.accounts, reference.commodities)
        splits = self._reader.fetch_splits(scope.relevant_accounts)

        end = end_date or date.today()
        start = start_date or self._effective_start(splits, end)
        date_points = generate_monthly_date_points(start, end)

        engine = ValuationEngine(
            scope,
            reference.base_currency.guid,
            self._reader.price_oracle(scope.account_commodity.values()),
            self._reader.currency_converter(reference, scope.account_currency.values()),
            self._logger,
        )
        points = engine.compute_time_series(splits, date_points)
        self._logger.info(
            f"Net worth series computed: {len(points)} points from {start} to {end}"
        )
        return NetWorthTimeSeries(reference.currency_code, points)

    @staticmethod
    def _effective_start(splits, end: date) -> date:
        dates = [split.post_date for split in splits if split.post_date is not None]
        if dates:
            return min(min(dates), end)
        return end - timedelta(days=365)


__all__ = ["GetNetWorthTimeSeriesUseCase"]
