"""Application use cases package."""

from .check_ledger_balance import CheckLedgerBalanceUseCase, LedgerBalanceReport
from .get_dashboard_kpis import GetDashboardKpisUseCase
from .get_income_expense_flow import GetIncomeExpenseFlowUseCase
from .get_investment_history import GetInvestmentHistoryUseCase
from .get_investment_portfolio import GetInvestmentPortfolioUseCase
from .get_net_worth_time_series import GetNetWorthTimeSeriesUseCase
from .ledger_data import LedgerReader, LedgerReference

__all__ = [
    "CheckLedgerBalanceUseCase",
    "GetDashboardKpisUseCase",
    "GetIncomeExpenseFlowUseCase",
    "GetInvestmentHistoryUseCase",
    "GetInvestmentPortfolioUseCase",
    "GetNetWorthTimeSeriesUseCase",
    "LedgerBalanceReport",
    "LedgerReader",
    "LedgerReference",
]
