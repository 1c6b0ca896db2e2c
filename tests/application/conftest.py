"""Shared fixtures for the application use case tests."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from src.domain.models import AccountDTO, CommodityRow, PriceRow, SplitRow


class FakeLedgerRepository:
    """In-memory ledger honouring the repository port contract."""

    def __init__(self, accounts, commodities, splits, prices) -> None:
        self.accounts = list(accounts)
        self.commodities = list(commodities)
        self.splits = list(splits)
        self.prices = list(prices)
        self.split_calls: list[tuple] = []

    def fetch_base_currency(self, mnemonic):
        currencies = sorted(
            (c for c in self.commodities if c.namespace == "CURRENCY"),
            key=lambda c: (c.mnemonic != mnemonic, c.mnemonic),
        )
        if not currencies:
            raise RuntimeError(f"Missing currency in commodities: {mnemonic}")
        return currencies[0]

    def fetch_accounts(self):
        return list(self.accounts)

    def fetch_commodities(self):
        return list(self.commodities)

    def fetch_splits(self, account_guids, start_date=None, end_date=None):
        wanted = set(account_guids)
        self.split_calls.append((wanted, start_date, end_date))
        return [
            split
            for split in self.splits
            if split.account_guid in wanted
            and (start_date is None or split.post_date >= start_date)
            and (end_date is None or split.post_date <= end_date)
        ]

    def fetch_prices(self, commodity_guids=None):
        wanted = set(commodity_guids) if commodity_guids is not None else None
        return [
            price
            for price in self.prices
            if wanted is None or price.commodity_guid in wanted
        ]


def _split(tx, account, cents, post_date, shares=None):
    if shares is None:
        return SplitRow(tx, account, cents, 100, cents, 100, post_date)
    return SplitRow(tx, account, cents, 100, shares, 1, post_date)


ACCOUNTS = [
    AccountDTO("root", "Root Account", "ROOT", None, None),
    AccountDTO("assets", "Assets", "ASSET", "usd", "root"),
    AccountDTO("checking", "Checking", "BANK", "usd", "assets"),
    AccountDTO("broker", "Brokerage", "ASSET", "usd", "assets"),
    AccountDTO("broker-cash", "Brokerage Cash", "BANK", "usd", "broker"),
    AccountDTO("acme", "ACME", "STOCK", "acme-c", "broker"),
    AccountDTO("liabilities", "Liabilities", "LIABILITY", "usd", "root"),
    AccountDTO("visa", "Visa", "CREDIT", "usd", "liabilities"),
    AccountDTO("income", "Income", "INCOME", "usd", "root"),
    AccountDTO("salary", "Salary", "INCOME", "usd", "income"),
    AccountDTO("expenses", "Expenses", "EXPENSE", "usd", "root"),
    AccountDTO("food", "Food", "EXPENSE", "usd", "expenses"),
    AccountDTO("rent", "Rent", "EXPENSE", "usd", "expenses"),
]

COMMODITIES = [
    CommodityRow("usd", "CURRENCY", "USD", "US Dollar"),
    CommodityRow("eur", "CURRENCY", "EUR", "Euro"),
    CommodityRow("acme-c", "NASDAQ", "ACME", "Acme Corp", 10000),
]

SPLITS = [
    _split("t0", "checking", 100000, date(2024, 1, 5)),
    _split("t0", "salary", -100000, date(2024, 1, 5)),
    _split("t1", "broker-cash", 60000, date(2024, 1, 10)),
    _split("t1", "checking", -60000, date(2024, 1, 10)),
    _split("t2", "acme", 50000, date(2024, 1, 15), shares=10),
    _split("t2", "broker-cash", -50000, date(2024, 1, 15)),
    _split("t3", "food", 40000, date(2024, 1, 20)),
    _split("t3", "visa", -40000, date(2024, 1, 20)),
    _split("t4", "rent", 30000, date(2024, 1, 25)),
    _split("t4", "checking", -30000, date(2024, 1, 25)),
]

PRICES = [
    PriceRow("acme-c", "usd", 5000, 100, date(2024, 1, 15)),
    PriceRow("acme-c", "usd", 6000, 100, date(2024, 2, 1)),
]


@pytest.fixture()
def ledger_repository() -> FakeLedgerRepository:
    """Small book: salary, a transfer, a stock buy and two expenses."""
    return FakeLedgerRepository(ACCOUNTS, COMMODITIES, SPLITS, PRICES)


@pytest.fixture()
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def failing_repository() -> MagicMock:
    repository = MagicMock()
    repository.fetch_base_currency.side_effect = ConnectionError("database is down")
    return repository
