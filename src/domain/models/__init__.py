"""Domain models package."""

from .accounts import AccountDTO
from .finance import (
    AllocationEntry,
    CashByAccount,
    CategoryTotal,
    ConsolidatedHolding,
    DashboardKpis,
    FlowGraph,
    FlowLink,
    FlowNode,
    Holding,
    IncomeExpenseFlow,
    InvestmentPortfolio,
    LedgerSnapshot,
    NetWorthPoint,
    NetWorthTimeSeries,
    OverallCash,
    PortfolioSummary,
    PortfolioValuePoint,
    SectorExposure,
)
from .gnucash_rows import CommodityRow, PriceRow, SplitRow
from .metadata import CommodityMetadata, SectorWeight

__all__ = [
    "AccountDTO",
    "AllocationEntry",
    "CashByAccount",
    "CategoryTotal",
    "CommodityMetadata",
    "CommodityRow",
    "ConsolidatedHolding",
    "DashboardKpis",
    "FlowGraph",
    "FlowLink",
    "FlowNode",
    "Holding",
    "IncomeExpenseFlow",
    "InvestmentPortfolio",
    "LedgerSnapshot",
    "NetWorthPoint",
    "NetWorthTimeSeries",
    "OverallCash",
    "PortfolioSummary",
    "PortfolioValuePoint",
    "PriceRow",
    "SectorExposure",
    "SectorWeight",
    "SplitRow",
]
