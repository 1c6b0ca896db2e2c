"""Domain constants for ledger valuation."""

from decimal import Decimal

CURRENCY_NAMESPACE = "CURRENCY"

ASSET_TYPES = (
    "ASSET",
    "BANK",
    "CASH",
    "RECEIVABLE",
)

INVESTMENT_TYPES = (
    "STOCK",
    "MUTUAL",
)

LIABILITY_TYPES = (
    "LIABILITY",
    "CREDIT",
    "PAYABLE",
)

CASH_SIBLING_TYPES = (
    "BANK",
    "ASSET",
    "CASH",
)

INCOME_TYPE = "INCOME"
EXPENSE_TYPE = "EXPENSE"
ROOT_TYPE = "ROOT"

CLOSED_SHARES_EPSILON = Decimal("0.0001")
CLOSED_VALUE_EPSILON = Decimal("0.01")

HIGH_CASH_PERCENT = 20.0
MEDIUM_CASH_PERCENT = 10.0

UNKNOWN_SECTOR = "Unknown"
OTHER_INCOME_LABEL = "Other Income"
OTHER_EXPENSES_LABEL = "Other Expenses"
SAVINGS_LABEL = "Savings"


__all__ = [
    "CURRENCY_NAMESPACE",
    "ASSET_TYPES",
    "INVESTMENT_TYPES",
    "LIABILITY_TYPES",
    "CASH_SIBLING_TYPES",
    "INCOME_TYPE",
    "EXPENSE_TYPE",
    "ROOT_TYPE",
    "CLOSED_SHARES_EPSILON",
    "CLOSED_VALUE_EPSILON",
    "HIGH_CASH_PERCENT",
    "MEDIUM_CASH_PERCENT",
    "UNKNOWN_SECTOR",
    "OTHER_INCOME_LABEL",
    "OTHER_EXPENSES_LABEL",
    "SAVINGS_LABEL",
]
