"""Domain policies package."""

from .cash_risk import HIGH_RISK, LOW_RISK, MEDIUM_RISK, classify_cash_risk
from .positions import is_closed_position

__all__ = [
    "HIGH_RISK",
    "MEDIUM_RISK",
    "LOW_RISK",
    "classify_cash_risk",
    "is_closed_position",
]
