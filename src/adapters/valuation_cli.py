"""CLI adapter printing ledger valuation reports.

Dates come from ``REPORT_START_DATE`` and ``REPORT_END_DATE`` (YYYY-MM-DD);
either may be omitted to use the report defaults.
"""

from datetime import date
import os

from src.application.errors import LedgerUnavailableError
from src.infrastructure.container import (
    build_balance_check_use_case,
    build_flow_use_case,
    build_net_worth_use_case,
    build_portfolio_use_case,
)
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.infrastructure.settings import DashboardSettings


def _parse_date(value: str | None, logger) -> date | None:
    """Parse an ISO date string into a date.

    Args:
        value: Date string in YYYY-MM-DD format.
        logger: Logger used for warnings.

    Returns:
        date | None: Parsed date or None when invalid.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        )
        return None


def _print_report(settings: DashboardSettings, start_date, end_date) -> None:
    series = build_net_worth_use_case(settings).execute(
        start_date=start_date,
        end_date=end_date,
    )
    print(f"Net worth ({series.currency_code})")
    for point in series.points:
        print(
            f"  {point.date.isoformat()}  net_worth={point.net_worth}  "
            f"assets={point.assets}  liabilities={point.liabilities}"
        )

    portfolio = build_portfolio_use_case(settings).execute(as_of=end_date)
    summary = portfolio.summary
    print(f"Portfolio as of {portfolio.as_of.isoformat()}")
    print(
        f"  value={summary.total_value}  cost_basis={summary.total_cost_basis}  "
        f"gain_loss={summary.total_gain_loss} "
        f"({summary.total_gain_loss_percent:.2f}%)"
    )
    print(
        f"  holdings={len(portfolio.holdings)}  "
        f"cash={portfolio.overall_cash.cash_percent:.2f}% "
        f"({portfolio.overall_cash.risk_level})"
    )

    flow = build_flow_use_case(settings).execute(
        start_date=start_date,
        end_date=end_date,
    )
    print(
        f"Income/expenses {flow.start_date.isoformat()} to {flow.end_date.isoformat()}"
    )
    print(
        f"  income={flow.total_income}  expenses={flow.total_expenses}  "
        f"savings={flow.savings}"
    )

    report = build_balance_check_use_case(settings).execute(
        start_date=start_date,
        end_date=end_date,
    )
    print(
        f"Transactions checked={report.transaction_count}  "
        f"unbalanced={len(report.unbalanced_transactions)}"
    )


def main() -> int:
    """Print net worth, portfolio and flow reports for the configured window."""
    logger = get_app_logger()
    settings = DashboardSettings.from_env()
    start_date = _parse_date(os.getenv("REPORT_START_DATE"), logger)
    end_date = _parse_date(os.getenv("REPORT_END_DATE"), logger)
    get_usage_logger().info(
        f"valuation_cli start={start_date} end={end_date} backend={settings.backend}"
    )

    try:
        _print_report(settings, start_date, end_date)
    except LedgerUnavailableError as exc:
        logger.error(str(exc))
        print(f"Ledger unavailable: {exc}")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
