"""Tests for GetNetWorthTimeSeriesUseCase."""

from datetime import date
from decimal import Decimal

import pytest

from src.application.errors import LedgerUnavailableError
from src.application.use_cases.get_net_worth_time_series import (
    GetNetWorthTimeSeriesUseCase,
)


def test_series_defaults_to_first_split(ledger_repository, logger) -> None:
    """The window starts at the earliest split and ends at end_date."""
    use_case = GetNetWorthTimeSeriesUseCase(ledger_repository, logger=logger)

    series = use_case.execute(end_date=date(2024, 2, 1))

    assert series.currency_code == "USD"
    assert [point.date for point in series.points] == [
        date(2024, 1, 31),
        date(2024, 2, 1),
    ]
    january, february = series.points
    assert january.assets == Decimal("700.00")
    assert january.liabilities == Decimal("-400.00")
    assert january.net_worth == Decimal("300.00")
    assert february.net_worth == Decimal("400.00")


def test_series_before_any_activity_is_zero(ledger_repository, logger) -> None:
    """Points before the first split are valued at zero."""
    use_case = GetNetWorthTimeSeriesUseCase(ledger_repository, logger=logger)

    series = use_case.execute(start_date=date(2023, 11, 1), end_date=date(2023, 12, 31))

    assert len(series.points) == 2
    assert all(point.net_worth == Decimal("0") for point in series.points)


def test_series_only_reads_balance_sheet_accounts(ledger_repository, logger) -> None:
    """Income and expense accounts are not fetched for valuation."""
    use_case = GetNetWorthTimeSeriesUseCase(ledger_repository, logger=logger)

    use_case.execute(end_date=date(2024, 2, 1))

    wanted, _, _ = ledger_repository.split_calls[0]
    assert wanted == {"assets", "checking", "broker", "broker-cash", "acme", "liabilities", "visa"}


def test_repository_failure_raises_ledger_unavailable(failing_repository, logger) -> None:
    """Repository errors surface as LedgerUnavailableError."""
    use_case = GetNetWorthTimeSeriesUseCase(failing_repository, logger=logger)

    with pytest.raises(LedgerUnavailableError):
        use_case.execute(end_date=date(2024, 2, 1))

    logger.error.assert_called_once()


def test_empty_book_raises_ledger_unavailable(ledger_repository, logger) -> None:
    """A book without accounts cannot be valued."""
    ledger_repository.accounts = []
    use_case = GetNetWorthTimeSeriesUseCase(ledger_repository, logger=logger)

    with pytest.raises(LedgerUnavailableError):
        use_case.execute(end_date=date(2024, 2, 1))
