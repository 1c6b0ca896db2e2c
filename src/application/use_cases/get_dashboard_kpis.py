"""Use case to compute the dashboard headline figures."""

from datetime import date, timedelta
from decimal import Decimal

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.get_income_expense_flow import (
    GetIncomeExpenseFlowUseCase,
)
from src.application.use_cases.ledger_data import LedgerReader
from src.domain.models import DashboardKpis
from src.domain.services import LedgerScope, ValuationEngine
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import round_money


class GetDashboardKpisUseCase:
    """Compute net worth change, savings rate and top expense."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        logger=None,
        base_currency: str = "USD",
    ) -> None:
        self._logger = logger or get_app_logger()
        self._reader = LedgerReader(ledger_repository, self._logger)
        self._flow_use_case = GetIncomeExpenseFlowUseCase(
            ledger_repository, self._logger, base_currency
        )
        self._base_currency = base_currency

    def execute(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> DashboardKpis:
        """Return headline figures for a window.

        Args:
            start_date: First day; defaults to one year before ``end_date``.
            end_date: Last day; defaults to today.

        Returns:
            DashboardKpis: Rounded figures for display.
        """
        end = end_date or date.today()
        start = start_date or end - timedelta(days=365)
        reference = self._reader.load_reference(self._base_currency)
        scope = LedgerScope.from_accounts(reference.accounts, reference.commodities)
        splits = self._reader.fetch_splits(scope.relevant_accounts, end_date=end)
        engine = ValuationEngine(
            scope,
            reference.base_currency.guid,
            self._reader.price_oracle(scope.account_commodity.values()),
            self._reader.currency_converter(reference, scope.account_currency.values()),
            self._logger,
        )
        start_snapshot, end_snapshot = engine.snapshots(splits, [min(start, end), end])

        change = end_snapshot.net_worth - start_snapshot.net_worth
        change_percent = 0.0
        if start_snapshot.net_worth != 0:
            change_percent = float(change / abs(start_snapshot.net_worth) * 100)

        flow = self._flow_use_case.execute(start, end)
        savings_rate = 0.0
        if flow.total_income > 0:
            savings_rate = float(
                (flow.total_income - flow.total_expenses) / flow.total_income * 100
            )
        top_name, top_amount = "", Decimal("0")
        for category in flow.expenses:
            if category.value > top_amount:
                top_name, top_amount = category.name, category.value

        self._logger.info(
            f"KPIs computed for {start} to {end}: net worth change {change:.2f}"
        )
        return DashboardKpis(
            currency_code=reference.currency_code,
            start_date=start,
            end_date=end,
            net_worth=round_money(end_snapshot.net_worth),
            net_worth_change=round_money(change),
            net_worth_change_percent=round(change_percent, 2),
            total_income=round_money(flow.total_income),
            total_expenses=round_money(flow.total_expenses),
            savings_rate=round(savings_rate, 2),
            top_expense_category=top_name,
            top_expense_amount=round_money(top_amount),
            investment_value=round_money(end_snapshot.investment_value),
        )


__all__ = ["GetDashboardKpisUseCase"]
