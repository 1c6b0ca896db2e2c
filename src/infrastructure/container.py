"""Composition root for wiring infrastructure adapters."""

from src.application.ports.commodity_metadata import CommodityMetadataPort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases import (
    CheckLedgerBalanceUseCase,
    GetDashboardKpisUseCase,
    GetIncomeExpenseFlowUseCase,
    GetInvestmentHistoryUseCase,
    GetInvestmentPortfolioUseCase,
    GetNetWorthTimeSeriesUseCase,
)
from src.infrastructure.commodity_metadata_repository import (
    InMemoryCommodityMetadataCache,
    SqlAlchemyCommodityMetadataRepository,
)
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.gnucash_repository_factory import (
    create_ledger_repository,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import DashboardSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_ledger_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: DashboardSettings | None = None,
) -> LedgerRepositoryPort:
    """Return the configured ledger repository."""
    resolved_db = db_port or build_database_adapter()
    return create_ledger_repository(
        resolved_db,
        logger=get_app_logger(),
        settings=settings or DashboardSettings.from_env(),
    )


def build_metadata_repository(
    settings: DashboardSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> CommodityMetadataPort:
    """Return the configured sector metadata source.

    ``sql`` reads the ``commodity_metadata`` table through the GnuCash
    engine; otherwise an in-memory cache is loaded from the JSON file when
    one is configured.
    """
    resolved = settings or DashboardSettings.from_env()
    if resolved.metadata_source == "sql":
        return SqlAlchemyCommodityMetadataRepository(db_port or build_database_adapter())
    if resolved.metadata_file is not None and resolved.metadata_file.exists():
        return InMemoryCommodityMetadataCache.from_json_file(
            resolved.metadata_file, logger=get_app_logger()
        )
    return InMemoryCommodityMetadataCache()


def build_net_worth_use_case(
    settings: DashboardSettings | None = None,
) -> GetNetWorthTimeSeriesUseCase:
    """Return the net worth time series use case."""
    resolved = settings or DashboardSettings.from_env()
    return GetNetWorthTimeSeriesUseCase(
        build_ledger_repository(settings=resolved),
        base_currency=resolved.base_currency,
    )


def build_portfolio_use_case(
    settings: DashboardSettings | None = None,
) -> GetInvestmentPortfolioUseCase:
    """Return the investment portfolio use case."""
    resolved = settings or DashboardSettings.from_env()
    return GetInvestmentPortfolioUseCase(
        build_ledger_repository(settings=resolved),
        metadata_repository=build_metadata_repository(resolved),
        base_currency=resolved.base_currency,
    )


def build_history_use_case(
    settings: DashboardSettings | None = None,
) -> GetInvestmentHistoryUseCase:
    """Return the portfolio history use case."""
    resolved = settings or DashboardSettings.from_env()
    return GetInvestmentHistoryUseCase(
        build_ledger_repository(settings=resolved),
        base_currency=resolved.base_currency,
    )


def build_flow_use_case(
    settings: DashboardSettings | None = None,
) -> GetIncomeExpenseFlowUseCase:
    """Return the income/expense flow use case."""
    resolved = settings or DashboardSettings.from_env()
    return GetIncomeExpenseFlowUseCase(
        build_ledger_repository(settings=resolved),
        base_currency=resolved.base_currency,
    )


def build_kpis_use_case(
    settings: DashboardSettings | None = None,
) -> GetDashboardKpisUseCase:
    """Return the dashboard KPI use case."""
    resolved = settings or DashboardSettings.from_env()
    return GetDashboardKpisUseCase(
        build_ledger_repository(settings=resolved),
        base_currency=resolved.base_currency,
    )


def build_balance_check_use_case(
    settings: DashboardSettings | None = None,
) -> CheckLedgerBalanceUseCase:
    """Return the transaction balance check use case."""
    resolved = settings or DashboardSettings.from_env()
    return CheckLedgerBalanceUseCase(
        build_ledger_repository(settings=resolved),
        base_currency=resolved.base_currency,
    )


__all__ = [
    "build_database_adapter",
    "build_ledger_repository",
    "build_metadata_repository",
    "build_net_worth_use_case",
    "build_portfolio_use_case",
    "build_history_use_case",
    "build_flow_use_case",
    "build_kpis_use_case",
    "build_balance_check_use_case",
]
