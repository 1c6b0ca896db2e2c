"""Tests for currency conversion."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from src.domain.models import PriceRow
from src.domain.services.fx import CurrencyConverter, build_rate_table


def _rows() -> list[PriceRow]:
    return [
        PriceRow("eur", "usd", 110, 100, date(2024, 2, 1)),
        PriceRow("eur", "usd", 120, 100, date(2024, 3, 1)),
        PriceRow("usd", "gbp", 80, 100, date(2024, 1, 1)),
    ]


def test_rate_table_uses_direct_and_inverse_quotes() -> None:
    """Inverse quotes become 1/value."""
    table = build_rate_table("usd", _rows())

    assert [point.value for point in table["eur"]] == [Decimal("1.2"), Decimal("1.1")]
    assert table["gbp"][0].value == Decimal("1.25")


def test_inverse_quote_does_not_override_same_day_direct() -> None:
    """A direct quote wins over an inverse quote on the same date."""
    rows = [
        PriceRow("eur", "usd", 110, 100, date(2024, 2, 1)),
        PriceRow("usd", "eur", 50, 100, date(2024, 2, 1)),
        PriceRow("usd", "eur", 80, 100, date(2024, 2, 2)),
    ]

    table = build_rate_table("usd", rows)

    assert [(point.date, point.value) for point in table["eur"]] == [
        (date(2024, 2, 2), Decimal("1.25")),
        (date(2024, 2, 1), Decimal("1.1")),
    ]


def test_zero_inverse_rate_is_skipped() -> None:
    """Inverse quotes of zero would divide by zero and are dropped."""
    logger = MagicMock()

    table = build_rate_table(
        "usd",
        [PriceRow("usd", "jpy", 0, 100, date(2024, 1, 1))],
        logger=logger,
    )

    assert table == {}
    logger.warning.assert_called_once()


def test_rate_as_of_fallbacks() -> None:
    """Base is 1, missing currency is 1, early dates use the oldest rate."""
    logger = MagicMock()
    converter = CurrencyConverter.from_price_rows("usd", _rows(), logger=logger)

    assert converter.rate_as_of("usd", date(2024, 1, 1)) == Decimal("1")
    assert converter.rate_as_of(None, date(2024, 1, 1)) == Decimal("1")
    assert converter.rate_as_of("eur", date(2024, 2, 15)) == Decimal("1.1")
    assert converter.rate_as_of("eur", date(2023, 6, 1)) == Decimal("1.1")
    assert converter.rate_as_of("chf", date(2024, 2, 15)) == Decimal("1")
    assert converter.rate_as_of("chf", date(2024, 3, 15)) == Decimal("1")
    logger.warning.assert_called_once()


def test_convert_multiplies_by_rate() -> None:
    """Amounts convert at the rate in force on the date."""
    converter = CurrencyConverter.from_price_rows("usd", _rows())

    assert converter.convert(Decimal("100"), "eur", date(2024, 3, 1)) == Decimal("120.0")
    assert converter.has_rates("eur") is True
    assert converter.has_rates("chf") is False
