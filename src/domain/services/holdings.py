"""Investment holdings per account and consolidated per commodity."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from src.domain.models import (
    AccountDTO,
    CommodityRow,
    ConsolidatedHolding,
    Holding,
    PortfolioSummary,
    SplitRow,
)
from src.domain.policies import is_closed_position
from src.domain.services.normalization import commodity_symbol
from src.domain.services.prices import PriceOracle
from src.domain.services.rational import rational_to_decimal
from src.utils.decimal_utils import quantize, round_money


def gain_loss_percent(gain_loss: Decimal, cost_basis: Decimal) -> float:
    """Return gain as a percent of the absolute cost basis, 0 without cost."""
    if cost_basis == 0:
        return 0.0
    return float(gain_loss / abs(cost_basis) * 100)


def compute_holding(
    account: AccountDTO,
    commodity: CommodityRow | None,
    splits: Iterable[SplitRow],
    price_oracle: PriceOracle,
    as_of: date,
    account_path: str = "",
) -> Holding:
    """Compute shares, cost basis and market value for one account.

    Shares sum split quantities and cost basis sums split values, so the
    cost basis is the net cash that went into the position.

    Args:
        account: Investment account.
        commodity: Commodity held by the account.
        splits: Splits posted to the account.
        price_oracle: Commodity prices.
        as_of: Valuation date; later splits are ignored.
        account_path: Display path of the account.

    Returns:
        Holding: Position as of ``as_of``.
    """
    shares = Decimal("0")
    cost_basis = Decimal("0")
    for split in splits:
        if split.post_date is not None and split.post_date > as_of:
            continue
        shares += rational_to_decimal(split.quantity_num, split.quantity_denom)
        cost_basis += rational_to_decimal(split.value_num, split.value_denom)
    commodity_guid = account.commodity_guid or ""
    price_point = price_oracle.latest_price_point(commodity_guid, as_of)
    latest_price = price_point.value if price_point else Decimal("0")
    market_value = shares * latest_price
    gain_loss = market_value - cost_basis
    return Holding(
        account_guid=account.guid,
        account_name=account.name,
        account_path=account_path or account.name,
        parent_guid=account.parent_guid,
        commodity_guid=commodity_guid,
        symbol=commodity_symbol(commodity),
        fullname=(commodity.fullname if commodity else None) or "",
        shares=shares,
        cost_basis=cost_basis,
        market_value=market_value,
        gain_loss=gain_loss,
        gain_loss_percent=gain_loss_percent(gain_loss, cost_basis),
        latest_price=latest_price,
        price_date=price_point.date if price_point else None,
    )


def filter_open_holdings(holdings: Iterable[Holding]) -> list[Holding]:
    """Drop closed positions."""
    return [
        holding
        for holding in holdings
        if not is_closed_position(holding.shares, holding.market_value)
    ]


def summarize_portfolio(holdings: Iterable[Holding]) -> PortfolioSummary:
    """Total market value, cost basis and gain over holdings."""
    total_value = Decimal("0")
    total_cost = Decimal("0")
    for holding in holdings:
        total_value += holding.market_value
        total_cost += holding.cost_basis
    total_gain = total_value - total_cost
    return PortfolioSummary(
        total_value=round_money(total_value),
        total_cost_basis=round_money(total_cost),
        total_gain_loss=round_money(total_gain),
        total_gain_loss_percent=round(gain_loss_percent(total_gain, total_cost), 2),
    )


def consolidate_holdings(holdings: Iterable[Holding]) -> list[ConsolidatedHolding]:
    """Group holdings by commodity.

    Gain and gain percent are recomputed from the summed figures, never
    summed from per-account percentages.

    Returns:
        list[ConsolidatedHolding]: Rows sorted by market value, descending,
        each listing its accounts by market value, descending.
    """
    groups: dict[str, list[Holding]] = {}
    for holding in holdings:
        groups.setdefault(holding.commodity_guid, []).append(holding)

    consolidated = []
    for commodity_guid, group in groups.items():
        total_shares = sum((h.shares for h in group), Decimal("0"))
        total_cost = sum((h.cost_basis for h in group), Decimal("0"))
        total_value = sum((h.market_value for h in group), Decimal("0"))
        total_gain = total_value - total_cost
        first = group[0]
        consolidated.append(
            ConsolidatedHolding(
                commodity_guid=commodity_guid,
                symbol=first.symbol,
                fullname=first.fullname,
                total_shares=quantize(total_shares, 4),
                total_cost_basis=round_money(total_cost),
                total_market_value=round_money(total_value),
                total_gain_loss=round_money(total_gain),
                total_gain_loss_percent=round(gain_loss_percent(total_gain, total_cost), 2),
                latest_price=first.latest_price,
                price_date=first.price_date,
                accounts=sorted(group, key=lambda h: h.market_value, reverse=True),
            )
        )
    consolidated.sort(key=lambda row: row.total_market_value, reverse=True)
    return consolidated


__all__ = [
    "gain_loss_percent",
    "compute_holding",
    "filter_open_holdings",
    "summarize_portfolio",
    "consolidate_holdings",
]
