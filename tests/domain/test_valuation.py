"""Tests for the net worth valuation engine."""

from datetime import date
from decimal import Decimal

import pytest

from src.domain.models import AccountDTO, CommodityRow, PriceRow, SplitRow
from src.domain.services.fx import CurrencyConverter
from src.domain.services.prices import PriceOracle
from src.domain.services.validation import find_unbalanced_transactions
from src.domain.services.valuation import LedgerScope, SplitCursor, ValuationEngine


T0 = date(2024, 1, 1)
T1 = date(2024, 1, 15)
T2 = date(2024, 2, 1)

COMMODITIES = [
    CommodityRow("usd", "CURRENCY", "USD"),
    CommodityRow("eur", "CURRENCY", "EUR"),
    CommodityRow("acme", "NASDAQ", "ACME", "Acme Corp", 10000),
]

ACCOUNTS = [
    AccountDTO("root", "Root Account", "ROOT", None, None),
    AccountDTO("bank", "Checking", "BANK", "usd", "root"),
    AccountDTO("stock", "ACME", "STOCK", "acme", "root"),
    AccountDTO("card", "Visa", "CREDIT", "usd", "root"),
    AccountDTO("euro", "Euro Savings", "BANK", "eur", "root"),
    AccountDTO("salary", "Salary", "INCOME", "usd", "root"),
    AccountDTO("food", "Groceries", "EXPENSE", "usd", "root"),
    AccountDTO("opening", "Opening Balances", "EQUITY", "usd", "root"),
    AccountDTO("hidden", "Old Bank", "BANK", "usd", "root", hidden=True),
]


def _split(tx, account, value_cents, quantity, post_date, quantity_denom=100):
    return SplitRow(tx, account, value_cents, 100, quantity, quantity_denom, post_date)


def _engine(prices=(), fx_rows=()) -> ValuationEngine:
    scope = LedgerScope.from_accounts(ACCOUNTS, COMMODITIES)
    oracle = PriceOracle.from_price_rows(prices)
    converter = CurrencyConverter.from_price_rows("usd", fx_rows)
    return ValuationEngine(scope, "usd", oracle, converter)


def _scenario_splits() -> list[SplitRow]:
    return [
        _split("t0", "bank", 100000, 100000, T0),
        _split("t0", "salary", -100000, -100000, T0),
        _split("t1", "bank", -50000, -50000, T1),
        _split("t1", "stock", 50000, 10, T1, quantity_denom=1),
    ]


def _card_splits() -> list[SplitRow]:
    return [
        _split("t0", "bank", 100000, 100000, T0),
        _split("t0", "salary", -100000, -100000, T0),
        _split("t1", "card", -25000, -25000, T1),
        _split("t1", "food", 25000, 25000, T1),
    ]


def _euro_splits() -> list[SplitRow]:
    return [
        _split("t0", "euro", 10000, 10000, T0),
        _split("t0", "opening", -10000, -10000, T0),
    ]


def _hidden_splits() -> list[SplitRow]:
    return [
        _split("t0", "hidden", 100000, 100000, T0),
        _split("t0", "opening", -100000, -100000, T0),
    ]


def _undated_splits() -> list[SplitRow]:
    return [
        _split("t", "bank", 100, 100, None),
        _split("t", "salary", -100, -100, None),
    ]


def _quiet_period_splits() -> list[SplitRow]:
    """Salary, a buy and a card charge, all before the 20th of January."""
    return _scenario_splits() + [
        _split("t2", "card", -25000, -25000, T1),
        _split("t2", "food", 25000, 25000, T1),
    ]


@pytest.mark.parametrize(
    "splits",
    [
        _scenario_splits(),
        _quiet_period_splits(),
        _card_splits(),
        _euro_splits(),
        _hidden_splits(),
        _undated_splits(),
    ],
)
def test_fixture_transactions_sum_to_zero(splits) -> None:
    """Every transaction used below balances in exact arithmetic."""
    assert find_unbalanced_transactions(splits) == []


def test_scope_classifies_accounts() -> None:
    """Accounts are split into assets, liabilities and investments."""
    scope = LedgerScope.from_accounts(ACCOUNTS, COMMODITIES)

    assert scope.asset_accounts == {"bank", "euro"}
    assert scope.liability_accounts == {"card"}
    assert scope.investment_accounts == {"stock"}
    assert scope.account_commodity == {"stock": "acme"}


def test_buy_then_price_rise_values_net_worth() -> None:
    """$500 cash plus 10 shares at $60 is $1100."""
    engine = _engine(prices=[PriceRow("acme", "usd", 6000, 100, T2)])

    (point,) = engine.compute_time_series(_scenario_splits(), [T2])

    assert point.assets == Decimal("1100.00")
    assert point.liabilities == Decimal("0.00")
    assert point.net_worth == Decimal("1100.00")


def test_time_series_is_point_in_time() -> None:
    """Each point only sees splits and prices up to its date."""
    engine = _engine(
        prices=[
            PriceRow("acme", "usd", 5000, 100, T1),
            PriceRow("acme", "usd", 6000, 100, T2),
        ]
    )

    points = engine.compute_time_series(
        _scenario_splits(), [date(2023, 12, 31), T0, T1, T2]
    )

    assert [point.net_worth for point in points] == [
        Decimal("0.00"),
        Decimal("1000.00"),
        Decimal("1000.00"),
        Decimal("1100.00"),
    ]


def test_liabilities_reduce_net_worth() -> None:
    """Liabilities keep their negative ledger sign."""
    (point,) = _engine().compute_time_series(_card_splits(), [T2])

    assert point.liabilities == Decimal("-250.00")
    assert point.net_worth == Decimal("750.00")


def test_foreign_cash_converts_at_point_date() -> None:
    """Foreign balances use the rate in force at each date point."""
    fx_rows = [
        PriceRow("eur", "usd", 110, 100, T0),
        PriceRow("eur", "usd", 120, 100, T2),
    ]

    points = _engine(fx_rows=fx_rows).compute_time_series(_euro_splits(), [T1, T2])

    assert [point.assets for point in points] == [Decimal("110.00"), Decimal("120.00")]


def test_hidden_accounts_are_ignored() -> None:
    """Splits on hidden accounts do not count."""
    (point,) = _engine().compute_time_series(_hidden_splits(), [T2])

    assert point.net_worth == Decimal("0.00")


def test_no_activity_yields_zero_points() -> None:
    """Every date point is reported even without splits."""
    points = _engine().compute_time_series([], [T0, T1])

    assert len(points) == 2
    assert all(point.net_worth == Decimal("0") for point in points)


def test_quiet_period_only_moves_with_prices() -> None:
    """Without splits between two points only the investment value changes."""
    d1 = date(2024, 1, 20)
    d2 = date(2024, 1, 31)
    engine = _engine(
        prices=[
            PriceRow("acme", "usd", 5000, 100, T1),
            PriceRow("acme", "usd", 5750, 100, date(2024, 1, 25)),
        ]
    )

    first, second = engine.snapshots(_quiet_period_splits(), [d1, d2])

    assert first.cash_assets == second.cash_assets == Decimal("500")
    assert first.liabilities == second.liabilities == Decimal("-250")
    shares = Decimal("10")
    assert second.net_worth - first.net_worth == shares * (Decimal("57.50") - Decimal("50.00"))
    assert second.net_worth - first.net_worth == Decimal("75")


def test_cursor_rejects_descending_dates() -> None:
    """Date points must ascend."""
    cursor = SplitCursor(_scenario_splits())
    list(cursor.advance_to(T2))

    with pytest.raises(ValueError):
        list(cursor.advance_to(T1))


def test_cursor_skips_undated_splits() -> None:
    """Splits without a post date are never folded."""
    cursor = SplitCursor(_undated_splits() + _scenario_splits())

    assert len(cursor) == 4
    assert len(list(cursor.advance_to(T0))) == 2
    assert cursor.position == 2
