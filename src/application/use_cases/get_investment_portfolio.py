"""Use case to build the investment portfolio view."""

from collections import defaultdict
from datetime import date
from decimal import Decimal

from src.application.ports.commodity_metadata import CommodityMetadataPort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.ledger_data import LedgerReader
from src.domain.models import CommodityMetadata, Holding, InvestmentPortfolio
from src.domain.services import (
    AccountTree,
    LedgerScope,
    build_allocation,
    compute_holding,
    compute_sector_exposure,
    consolidate_holdings,
    detect_cash_by_account,
    filter_open_holdings,
    rational_to_decimal,
    summarize_cash,
    summarize_portfolio,
)
from src.domain.services.allocation import cash_sibling_guids
from src.infrastructure.logging.logger import get_app_logger


class GetInvestmentPortfolioUseCase:
    """Compute holdings, allocation, idle cash and sector exposure."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        metadata_repository: CommodityMetadataPort | None = None,
        logger=None,
        base_currency: str = "USD",
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port providing ledger rows.
            metadata_repository: Optional port providing sector metadata.
            logger: Optional logger compatible with logging.Logger-like API.
            base_currency: Mnemonic of the reporting currency.
        """
        self._logger = logger or get_app_logger()
        self._reader = LedgerReader(ledger_repository, self._logger)
        self._metadata_repository = metadata_repository
        self._base_currency = base_currency

    def execute(
        self,
        as_of: date | None = None,
        include_closed: bool = False,
    ) -> InvestmentPortfolio:
        """Return the portfolio as of a date.

        Args:
            as_of: Valuation date; defaults to today.
            include_closed: Whether closed positions are listed.

        Returns:
            InvestmentPortfolio: Holdings and the figures derived from them.
        """
        as_of = as_of or date.today()
        reference = self._reader.load_reference(self._base_currency)
        tree = AccountTree(reference.accounts, self._logger)
        scope = LedgerScope.from_accounts(
            reference.accounts, reference.commodities, include_hidden=True
        )
        investment_accounts = [
            account
            for account in tree.accounts()
            if account.guid in scope.investment_accounts
        ]
        parent_guids = {
            account.parent_guid for account in investment_accounts if account.parent_guid
        }
        cash_guids = {
            guid for parent_guid in parent_guids for guid in cash_sibling_guids(tree, parent_guid)
        }
        splits = self._reader.fetch_splits(
            [account.guid for account in investment_accounts] + sorted(cash_guids),
            end_date=as_of,
        )
        splits_by_account = defaultdict(list)
        for split in splits:
            splits_by_account[split.account_guid].append(split)

        oracle = self._reader.price_oracle(scope.account_commodity.values())
        commodities = reference.commodities_by_guid()
        holdings = [
            compute_holding(
                account,
                commodities.get(account.commodity_guid),
                splits_by_account.get(account.guid, []),
                oracle,
                as_of,
                tree.path(account.guid),
            )
            for account in investment_accounts
        ]
        visible = holdings if include_closed else filter_open_holdings(holdings)
        self._logger.info(
            f"Computed {len(holdings)} holdings, {len(visible)} shown as of {as_of}"
        )

        balances = self._cash_balances(splits_by_account, cash_guids, as_of)
        cash_rows = detect_cash_by_account(visible, tree, balances)
        return InvestmentPortfolio(
            currency_code=reference.currency_code,
            as_of=as_of,
            summary=summarize_portfolio(visible),
            holdings=visible,
            consolidated_holdings=consolidate_holdings(visible),
            allocation=build_allocation(visible),
            cash_by_account=cash_rows,
            overall_cash=summarize_cash(cash_rows),
            sector_exposure=compute_sector_exposure(
                visible, self._load_metadata(visible), self._logger
            ),
        )

    @staticmethod
    def _cash_balances(splits_by_account, cash_guids, as_of: date) -> dict[str, Decimal]:
        balances: dict[str, Decimal] = {}
        for guid in cash_guids:
            balances[guid] = sum(
                (
                    rational_to_decimal(split.value_num, split.value_denom)
                    for split in splits_by_account.get(guid, [])
                    if split.post_date is None or split.post_date <= as_of
                ),
                Decimal("0"),
            )
        return balances

    def _load_metadata(self, holdings: list[Holding]) -> dict[str, CommodityMetadata | None]:
        metadata: dict[str, CommodityMetadata | None] = {}
        if self._metadata_repository is None:
            return metadata
        for holding in holdings:
            guid = holding.commodity_guid
            if guid in metadata:
                continue
            try:
                metadata[guid] = self._metadata_repository.fetch_metadata(guid)
            except Exception as exc:
                self._logger.warning(
                    f"Sector metadata unavailable for {holding.symbol or guid}: {exc}"
                )
                metadata[guid] = None
        return metadata


__all__ = ["GetInvestmentPortfolioUseCase"]
