"""Domain services package."""

from .account_tree import AccountTree
from .allocation import (
    build_allocation,
    compute_sector_exposure,
    detect_cash_by_account,
    extract_account_category,
    summarize_cash,
)
from .flow import (
    aggregate_income_expense_flow,
    build_category_totals,
    build_flow_graph,
    sum_split_totals,
)
from .fx import CurrencyConverter, build_rate_table
from .holdings import (
    compute_holding,
    consolidate_holdings,
    filter_open_holdings,
    summarize_portfolio,
)
from .normalization import (
    commodity_symbol,
    is_currency,
    normalize_mnemonic,
    normalize_namespace,
)
from .prices import PriceOracle, PricePoint
from .rational import (
    decimal_to_rational,
    format_rational,
    rational_to_decimal,
    rational_to_fraction,
)
from .validation import find_unbalanced_transactions
from .valuation import LedgerScope, SplitCursor, ValuationEngine

__all__ = [
    "AccountTree",
    "CurrencyConverter",
    "LedgerScope",
    "PriceOracle",
    "PricePoint",
    "SplitCursor",
    "ValuationEngine",
    "aggregate_income_expense_flow",
    "build_allocation",
    "build_category_totals",
    "build_flow_graph",
    "build_rate_table",
    "commodity_symbol",
    "compute_holding",
    "compute_sector_exposure",
    "consolidate_holdings",
    "decimal_to_rational",
    "detect_cash_by_account",
    "extract_account_category",
    "filter_open_holdings",
    "find_unbalanced_transactions",
    "format_rational",
    "is_currency",
    "normalize_mnemonic",
    "normalize_namespace",
    "rational_to_decimal",
    "rational_to_fraction",
    "sum_split_totals",
    "summarize_cash",
    "summarize_portfolio",
]
