"""Use case to aggregate income and expenses into a flow graph."""

from datetime import date, timedelta

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.ledger_data import LedgerReader
from src.domain.constants import EXPENSE_TYPE, INCOME_TYPE
from src.domain.models import IncomeExpenseFlow
from src.domain.services import (
    AccountTree,
    aggregate_income_expense_flow,
    sum_split_totals,
)
from src.infrastructure.logging.logger import get_app_logger


class GetIncomeExpenseFlowUseCase:
    """Compute income and expense categories, savings and Sankey links."""

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
    ) -> IncomeExpenseFlow:
        """Return the income and expense flow for a window.

        Args:
            start_date: First day; defaults to one year before ``end_date``.
            end_date: Last day; defaults to today.

        Returns:
            IncomeExpenseFlow: Category totals, savings and flow graph.
        """
        end = end_date or date.today()
        start = start_date or end - timedelta(days=365)
        reference = self._reader.load_reference(self._base_currency)
        visible = [account for account in reference.accounts if not account.hidden]
        tree = AccountTree(visible, self._logger)

        flow_guids: set[str] = set()
        for account_type in (INCOME_TYPE, EXPENSE_TYPE):
            for parent in tree.top_level(account_type):
                flow_guids.update(tree.descendants(parent.guid))
        account_currency = {
            guid: tree.get(guid).commodity_guid for guid in flow_guids
        }

        splits = self._reader.fetch_splits(flow_guids, start, end)
        converter = self._reader.currency_converter(reference, account_currency.values())
        split_totals = sum_split_totals(splits, account_currency, converter, end)
        flow = aggregate_income_expense_flow(
            tree, split_totals, reference.currency_code, start, end, self._logger
        )
        self._logger.info(
            f"Income/expense flow computed: income={flow.total_income}, "
            f"expenses={flow.total_expenses}, savings={flow.savings}"
        )
        return flow


__all__ = ["GetIncomeExpenseFlowUseCase"]
