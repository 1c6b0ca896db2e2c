"""Allocation by account category, idle cash detection and sector exposure."""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from logging import Logger

from src.domain.constants import CASH_SIBLING_TYPES, UNKNOWN_SECTOR
from src.domain.models import (
    AllocationEntry,
    CashByAccount,
    CommodityMetadata,
    Holding,
    OverallCash,
    SectorExposure,
)
from src.domain.policies import classify_cash_risk
from src.domain.services.account_tree import AccountTree
from src.utils.decimal_utils import round_money


def _percent(part: Decimal, total: Decimal) -> float:
    if total <= 0:
        return 0.0
    return round(float(part / total * 100), 2)


def extract_account_category(account_path: str) -> str:
    """Return the display category of an account path.

    The category is the parent folder (second-to-last segment) for paths
    of three or more segments, otherwise the last segment.
    """
    parts = account_path.split(":")
    if len(parts) >= 3:
        return parts[-2]
    return parts[-1] or "Other"


def build_allocation(holdings: Iterable[Holding]) -> list[AllocationEntry]:
    """Group holdings market value by account category.

    Returns:
        list[AllocationEntry]: Categories sorted by value, descending.
    """
    totals: dict[str, Decimal] = {}
    for holding in holdings:
        category = extract_account_category(holding.account_path)
        totals[category] = totals.get(category, Decimal("0")) + holding.market_value
    grand_total = sum(totals.values(), Decimal("0"))
    entries = [
        AllocationEntry(
            category=category,
            value=round_money(value),
            percent=float(value / grand_total * 100) if grand_total > 0 else 0.0,
        )
        for category, value in totals.items()
    ]
    entries.sort(key=lambda entry: entry.value, reverse=True)
    return entries


def cash_sibling_guids(tree: AccountTree, parent_guid: str) -> list[str]:
    """Return BANK, ASSET and CASH accounts directly under ``parent_guid``."""
    return [
        child.guid
        for child in tree.children(parent_guid)
        if child.account_type in CASH_SIBLING_TYPES
    ]


def detect_cash_by_account(
    holdings: Iterable[Holding],
    tree: AccountTree,
    balances: Mapping[str, Decimal],
) -> list[CashByAccount]:
    """Pair each brokerage parent's investments with its idle cash.

    Args:
        holdings: Visible holdings.
        tree: Account hierarchy.
        balances: Current balance per account GUID.

    Returns:
        list[CashByAccount]: One row per parent, in first-seen order.
    """
    investment_by_parent: dict[str, Decimal] = {}
    for holding in holdings:
        if not holding.parent_guid:
            continue
        investment_by_parent[holding.parent_guid] = (
            investment_by_parent.get(holding.parent_guid, Decimal("0"))
            + holding.market_value
        )

    rows = []
    for parent_guid, investment_value in investment_by_parent.items():
        cash_balance = sum(
            (balances.get(guid, Decimal("0")) for guid in cash_sibling_guids(tree, parent_guid)),
            Decimal("0"),
        )
        parent = tree.get(parent_guid)
        cash_percent = _percent(cash_balance, cash_balance + investment_value)
        rows.append(
            CashByAccount(
                parent_guid=parent_guid,
                parent_name=parent.name if parent else "Unknown",
                parent_path=tree.path(parent_guid),
                cash_balance=round_money(cash_balance),
                investment_value=round_money(investment_value),
                cash_percent=cash_percent,
                risk_level=classify_cash_risk(cash_percent),
            )
        )
    return rows


def summarize_cash(rows: Iterable[CashByAccount]) -> OverallCash:
    """Sum cash and investments across every brokerage parent."""
    total_cash = Decimal("0")
    total_investment = Decimal("0")
    for row in rows:
        total_cash += row.cash_balance
        total_investment += row.investment_value
    total_value = total_cash + total_investment
    cash_percent = _percent(total_cash, total_value)
    return OverallCash(
        total_cash_balance=round_money(total_cash),
        total_investment_value=round_money(total_investment),
        total_value=round_money(total_value),
        cash_percent=cash_percent,
        risk_level=classify_cash_risk(cash_percent),
    )


def compute_sector_exposure(
    holdings: Iterable[Holding],
    metadata: Mapping[str, CommodityMetadata | None],
    logger: Logger | None = None,
) -> list[SectorExposure]:
    """Spread holdings market value across sectors.

    Sector weights are percentages: a holding contributes
    ``market_value * weight / 100`` to each weighted sector. A commodity
    with a single sector contributes fully to it, and one without
    metadata is reported under ``Unknown``.

    Args:
        holdings: Visible holdings.
        metadata: Metadata per commodity GUID, None when unavailable.
        logger: Optional logger for commodities without metadata.

    Returns:
        list[SectorExposure]: Sectors sorted by value, descending.
    """
    totals: dict[str, Decimal] = {}
    total_value = Decimal("0")
    for holding in holdings:
        total_value += holding.market_value
        entry = metadata.get(holding.commodity_guid)
        if entry is not None and entry.sector_weights:
            for weight in entry.sector_weights:
                share = holding.market_value * weight.weight / 100
                totals[weight.sector] = totals.get(weight.sector, Decimal("0")) + share
        elif entry is not None and entry.sector:
            totals[entry.sector] = totals.get(entry.sector, Decimal("0")) + holding.market_value
        else:
            if logger:
                logger.debug(f"No sector metadata for {holding.symbol or holding.commodity_guid}")
            totals[UNKNOWN_SECTOR] = totals.get(UNKNOWN_SECTOR, Decimal("0")) + holding.market_value

    exposure = [
        SectorExposure(sector=sector, value=round_money(value), percent=_percent(value, total_value))
        for sector, value in totals.items()
    ]
    exposure.sort(key=lambda row: row.value, reverse=True)
    return exposure


__all__ = [
    "extract_account_category",
    "build_allocation",
    "cash_sibling_guids",
    "detect_cash_by_account",
    "summarize_cash",
    "compute_sector_exposure",
]
