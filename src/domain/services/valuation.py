"""Net worth valuation over ascending date points.

Splits are folded once, in date order, into running per-account totals.
Each date point is valued from those totals, so the ledger is scanned a
single time however many points are requested.
"""

from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from logging import Logger

from src.domain.constants import (
    ASSET_TYPES,
    INVESTMENT_TYPES,
    LIABILITY_TYPES,
)
from src.domain.models import (
    AccountDTO,
    CommodityRow,
    LedgerSnapshot,
    NetWorthPoint,
    SplitRow,
)
from src.domain.services.fx import CurrencyConverter
from src.domain.services.normalization import is_currency
from src.domain.services.prices import PriceOracle
from src.domain.services.rational import rational_to_decimal
from src.utils.decimal_utils import round_money


@dataclass(frozen=True)
class LedgerScope:
    """Accounts taking part in a valuation and how each is treated.

    Attributes:
        asset_accounts: Cash-like asset accounts.
        liability_accounts: Liability accounts.
        investment_accounts: Accounts holding a non-currency commodity.
        account_currency: Currency GUID of each cash or liability account.
        account_commodity: Commodity GUID of each investment account.
    """

    asset_accounts: frozenset[str] = frozenset()
    liability_accounts: frozenset[str] = frozenset()
    investment_accounts: frozenset[str] = frozenset()
    account_currency: Mapping[str, str | None] = field(default_factory=dict)
    account_commodity: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_accounts(
        cls,
        accounts: Iterable[AccountDTO],
        commodities: Iterable[CommodityRow],
        include_hidden: bool = False,
    ) -> "LedgerScope":
        """Classify accounts by type and commodity namespace.

        Args:
            accounts: Every account of the book.
            commodities: Every commodity of the book.
            include_hidden: Whether hidden accounts are valued.

        Returns:
            LedgerScope: Classified account sets.
        """
        currency_guids = {
            commodity.guid for commodity in commodities if is_currency(commodity)
        }
        assets: set[str] = set()
        liabilities: set[str] = set()
        investments: set[str] = set()
        account_currency: dict[str, str | None] = {}
        account_commodity: dict[str, str] = {}
        for account in accounts:
            if account.hidden and not include_hidden:
                continue
            if account.account_type in INVESTMENT_TYPES:
                if (
                    account.commodity_guid
                    and account.commodity_guid not in currency_guids
                ):
                    investments.add(account.guid)
                    account_commodity[account.guid] = account.commodity_guid
            elif account.account_type in ASSET_TYPES:
                assets.add(account.guid)
                account_currency[account.guid] = account.commodity_guid
            elif account.account_type in LIABILITY_TYPES:
                liabilities.add(account.guid)
                account_currency[account.guid] = account.commodity_guid
        return cls(
            frozenset(assets),
            frozenset(liabilities),
            frozenset(investments),
            account_currency,
            account_commodity,
        )

    @property
    def relevant_accounts(self) -> frozenset[str]:
        return self.asset_accounts | self.liability_accounts | self.investment_accounts

    def investments_only(self) -> "LedgerScope":
        """Return a scope restricted to investment accounts."""
        return LedgerScope(
            investment_accounts=self.investment_accounts,
            account_commodity=self.account_commodity,
        )


class SplitCursor:
    """Forward-only iterator over splits ordered by post date."""

    def __init__(self, splits: Iterable[SplitRow]) -> None:
        self._splits = sorted(
            (split for split in splits if split.post_date is not None),
            key=lambda split: split.post_date,
        )
        self._position = 0
        self._last_as_of: date | None = None

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._splits)

    def advance_to(self, as_of: date) -> Iterator[SplitRow]:
        """Yield splits posted on or before ``as_of`` not yet consumed.

        Raises:
            ValueError: If ``as_of`` is earlier than a previous call.
        """
        if self._last_as_of is not None and as_of < self._last_as_of:
            raise ValueError(
                f"Date points must ascend: {as_of} after {self._last_as_of}"
            )
        self._last_as_of = as_of
        while self._position < len(self._splits):
            split = self._splits[self._position]
            if split.post_date > as_of:
                break
            self._position += 1
            yield split


class LedgerAccumulator:
    """Running totals of cash, liabilities and shares in native units."""

    def __init__(self, scope: LedgerScope, base_currency_guid: str) -> None:
        self._scope = scope
        self._base_currency_guid = base_currency_guid
        self.base_assets = Decimal("0")
        self.base_liabilities = Decimal("0")
        self.foreign_assets: dict[str, Decimal] = defaultdict(Decimal)
        self.foreign_liabilities: dict[str, Decimal] = defaultdict(Decimal)
        self.shares: dict[str, Decimal] = defaultdict(Decimal)

    def _is_base(self, currency_guid: str | None) -> bool:
        return not currency_guid or currency_guid == self._base_currency_guid

    def fold(self, split: SplitRow) -> None:
        """Add one split to the running totals."""
        account_guid = split.account_guid
        quantity = rational_to_decimal(split.quantity_num, split.quantity_denom)
        scope = self._scope
        if account_guid in scope.investment_accounts:
            self.shares[account_guid] += quantity
            return
        currency_guid = scope.account_currency.get(account_guid)
        if account_guid in scope.asset_accounts:
            if self._is_base(currency_guid):
                self.base_assets += quantity
            else:
                self.foreign_assets[currency_guid] += quantity
        elif account_guid in scope.liability_accounts:
            if self._is_base(currency_guid):
                self.base_liabilities += quantity
            else:
                self.foreign_liabilities[currency_guid] += quantity

    def investment_value(self, as_of: date, price_oracle: PriceOracle) -> Decimal:
        """Return the market value of all shares held as of ``as_of``."""
        total = Decimal("0")
        for account_guid, shares in self.shares.items():
            if not shares:
                continue
            commodity_guid = self._scope.account_commodity.get(account_guid)
            if commodity_guid is None:
                continue
            total += shares * price_oracle.latest_price_as_of(commodity_guid, as_of)
        return total

    def snapshot(
        self,
        as_of: date,
        price_oracle: PriceOracle,
        converter: CurrencyConverter,
    ) -> LedgerSnapshot:
        """Value the running totals at ``as_of`` without rounding."""
        cash_assets = self.base_assets
        for currency_guid, amount in self.foreign_assets.items():
            cash_assets += converter.convert(amount, currency_guid, as_of)
        liabilities = self.base_liabilities
        for currency_guid, amount in self.foreign_liabilities.items():
            liabilities += converter.convert(amount, currency_guid, as_of)
        return LedgerSnapshot(
            date=as_of,
            cash_assets=cash_assets,
            liabilities=liabilities,
            investment_value=self.investment_value(as_of, price_oracle),
        )


def to_net_worth_point(snapshot: LedgerSnapshot) -> NetWorthPoint:
    """Round a snapshot into a reportable net worth point."""
    return NetWorthPoint(
        date=snapshot.date,
        net_worth=round_money(snapshot.net_worth),
        assets=round_money(snapshot.assets),
        liabilities=round_money(snapshot.liabilities),
    )


class ValuationEngine:
    """Value a ledger at successive date points.

    Args:
        scope: Classified accounts to value.
        base_currency_guid: GUID of the reporting currency.
        price_oracle: Commodity prices.
        converter: Exchange rates into the base currency.
        logger: Optional logger.
    """

    def __init__(
        self,
        scope: LedgerScope,
        base_currency_guid: str,
        price_oracle: PriceOracle,
        converter: CurrencyConverter,
        logger: Logger | None = None,
    ) -> None:
        self._scope = scope
        self._base_currency_guid = base_currency_guid
        self._price_oracle = price_oracle
        self._converter = converter
        self._logger = logger

    def snapshots(
        self, splits: Iterable[SplitRow], date_points: Iterable[date]
    ) -> list[LedgerSnapshot]:
        """Return unrounded snapshots for each date point.

        Args:
            splits: Splits of any accounts, in any order.
            date_points: Ascending dates to value the ledger at.

        Returns:
            list[LedgerSnapshot]: One snapshot per date point.
        """
        relevant = self._scope.relevant_accounts
        cursor = SplitCursor(split for split in splits if split.account_guid in relevant)
        state = LedgerAccumulator(self._scope, self._base_currency_guid)
        results = []
        for as_of in date_points:
            for split in cursor.advance_to(as_of):
                state.fold(split)
            results.append(state.snapshot(as_of, self._price_oracle, self._converter))
        if self._logger:
            self._logger.debug(
                f"Valued {len(results)} date points from {cursor.position} splits"
            )
        return results

    def compute_time_series(
        self, splits: Iterable[SplitRow], date_points: Iterable[date]
    ) -> list[NetWorthPoint]:
        """Return net worth points rounded to cents for each date point."""
        return [to_net_worth_point(snapshot) for snapshot in self.snapshots(splits, date_points)]


__all__ = [
    "LedgerScope",
    "SplitCursor",
    "LedgerAccumulator",
    "ValuationEngine",
    "to_net_worth_point",
]
