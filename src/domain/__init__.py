"""Domain package for valuation rules and core models."""

from .constants import ASSET_TYPES, INVESTMENT_TYPES, LIABILITY_TYPES
from .models import (
    AccountDTO,
    CommodityMetadata,
    CommodityRow,
    Holding,
    NetWorthPoint,
    PriceRow,
    SplitRow,
)
from .policies import classify_cash_risk, is_closed_position
from .services import (
    AccountTree,
    CurrencyConverter,
    LedgerScope,
    PriceOracle,
    ValuationEngine,
    format_rational,
    rational_to_decimal,
)

__all__ = [
    "ASSET_TYPES",
    "INVESTMENT_TYPES",
    "LIABILITY_TYPES",
    "AccountDTO",
    "CommodityMetadata",
    "CommodityRow",
    "Holding",
    "NetWorthPoint",
    "PriceRow",
    "SplitRow",
    "classify_cash_risk",
    "is_closed_position",
    "AccountTree",
    "CurrencyConverter",
    "LedgerScope",
    "PriceOracle",
    "ValuationEngine",
    "format_rational",
    "rational_to_decimal",
]
