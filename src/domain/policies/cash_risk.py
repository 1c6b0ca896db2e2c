"""Policies for banding idle cash in brokerage accounts."""

from src.domain.constants import HIGH_CASH_PERCENT, MEDIUM_CASH_PERCENT

HIGH_RISK = "high"
MEDIUM_RISK = "medium"
LOW_RISK = "low"


def classify_cash_risk(cash_percent: float) -> str:
    """Band a cash percentage into high, medium or low.

    Each cut is exclusive: exactly 20 percent is medium and exactly 10
    percent is low.
    """
    if cash_percent > HIGH_CASH_PERCENT:
        return HIGH_RISK
    if cash_percent > MEDIUM_CASH_PERCENT:
        return MEDIUM_RISK
    return LOW_RISK


__all__ = ["HIGH_RISK", "MEDIUM_RISK", "LOW_RISK", "classify_cash_risk"]
