"""Domain models for valuation results."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class NetWorthPoint:
    """Net worth valued at one date point.

    Attributes:
        date: Date the ledger was valued at.
        net_worth: Assets plus liabilities.
        assets: Cash assets plus investment market value.
        liabilities: Liability balance, negative by ledger convention.
    """

    date: date
    net_worth: Decimal
    assets: Decimal
    liabilities: Decimal


@dataclass(frozen=True)
class LedgerSnapshot:
    """Unrounded valuation of the running ledger state at one date."""

    date: date
    cash_assets: Decimal
    liabilities: Decimal
    investment_value: Decimal

    @property
    def assets(self) -> Decimal:
        """Return cash assets plus investment value."""
        return self.cash_assets + self.investment_value

    @property
    def net_worth(self) -> Decimal:
        """Return assets plus the negative-signed liabilities."""
        return self.assets + self.liabilities


@dataclass(frozen=True)
class NetWorthTimeSeries:
    """Net worth points expressed in a base currency."""

    currency_code: str
    points: list[NetWorthPoint]


@dataclass(frozen=True)
class Holding:
    """Position held in one investment account."""

    account_guid: str
    account_name: str
    account_path: str
    parent_guid: str | None
    commodity_guid: str
    symbol: str
    fullname: str
    shares: Decimal
    cost_basis: Decimal
    market_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: float
    latest_price: Decimal
    price_date: date | None = None


@dataclass(frozen=True)
class ConsolidatedHolding:
    """Positions in one commodity summed across accounts."""

    commodity_guid: str
    symbol: str
    fullname: str
    total_shares: Decimal
    total_cost_basis: Decimal
    total_market_value: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percent: float
    latest_price: Decimal
    price_date: date | None
    accounts: list[Holding] = field(default_factory=list)


@dataclass(frozen=True)
class PortfolioSummary:
    """Totals over the visible holdings."""

    total_value: Decimal
    total_cost_basis: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percent: float


@dataclass(frozen=True)
class AllocationEntry:
    """Market value attributed to one account category."""

    category: str
    value: Decimal
    percent: float


@dataclass(frozen=True)
class CashByAccount:
    """Cash held next to the holdings of one parent account."""

    parent_guid: str
    parent_name: str
    parent_path: str
    cash_balance: Decimal
    investment_value: Decimal
    cash_percent: float
    risk_level: str


@dataclass(frozen=True)
class OverallCash:
    """Cash share across every brokerage parent."""

    total_cash_balance: Decimal
    total_investment_value: Decimal
    total_value: Decimal
    cash_percent: float
    risk_level: str


@dataclass(frozen=True)
class SectorExposure:
    """Market value attributed to one sector."""

    sector: str
    value: Decimal
    percent: float


@dataclass(frozen=True)
class PortfolioValuePoint:
    """Portfolio market value at a price date."""

    date: date
    value: Decimal


@dataclass(frozen=True)
class InvestmentPortfolio:
    """Full investment view rendered by the dashboard."""

    currency_code: str
    as_of: date
    summary: PortfolioSummary
    holdings: list[Holding]
    consolidated_holdings: list[ConsolidatedHolding]
    allocation: list[AllocationEntry]
    cash_by_account: list[CashByAccount]
    overall_cash: OverallCash
    sector_exposure: list[SectorExposure]


@dataclass(frozen=True)
class CategoryTotal:
    """Income or expense total for a category and its sub-categories.

    ``children`` keeps the positive sub-category totals one level down,
    so a chart can drill into a category. ``depth`` is 0 for direct
    children of the top-level Income or Expense account.
    """

    guid: str | None
    name: str
    value: Decimal
    depth: int = 0
    children: tuple["CategoryTotal", ...] = ()

    @property
    def levels(self) -> int:
        """Number of category levels from this node down."""
        return 1 + max((child.levels for child in self.children), default=0)


@dataclass(frozen=True)
class FlowNode:
    """Node of the income to expense flow graph."""

    name: str
    kind: str


@dataclass(frozen=True)
class FlowLink:
    """Weighted edge between two flow nodes, by node index."""

    source: int
    target: int
    value: Decimal


@dataclass(frozen=True)
class FlowGraph:
    """Nodes and links suitable for a Sankey chart."""

    nodes: list[FlowNode]
    links: list[FlowLink]


@dataclass(frozen=True)
class IncomeExpenseFlow:
    """Income and expense categories over a date window."""

    currency_code: str
    start_date: date
    end_date: date
    income: list[CategoryTotal]
    expenses: list[CategoryTotal]
    total_income: Decimal
    total_expenses: Decimal
    savings: Decimal
    graph: FlowGraph

    @property
    def max_depth(self) -> int:
        """Deepest category level on either side, 0 when there is no data."""
        return max((category.levels for category in [*self.income, *self.expenses]), default=0)


@dataclass(frozen=True)
class DashboardKpis:
    """Headline figures for a reporting window."""

    currency_code: str
    start_date: date
    end_date: date
    net_worth: Decimal
    net_worth_change: Decimal
    net_worth_change_percent: float
    total_income: Decimal
    total_expenses: Decimal
    savings_rate: float
    top_expense_category: str
    top_expense_amount: Decimal
    investment_value: Decimal


__all__ = [
    "NetWorthPoint",
    "LedgerSnapshot",
    "NetWorthTimeSeries",
    "Holding",
    "ConsolidatedHolding",
    "PortfolioSummary",
    "AllocationEntry",
    "CashByAccount",
    "OverallCash",
    "SectorExposure",
    "PortfolioValuePoint",
    "InvestmentPortfolio",
    "CategoryTotal",
    "FlowNode",
    "FlowLink",
    "FlowGraph",
    "IncomeExpenseFlow",
    "DashboardKpis",
]
