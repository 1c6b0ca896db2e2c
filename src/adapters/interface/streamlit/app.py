"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

import streamlit as st
import altair as alt

from src.adapters.interface.streamlit.sankey_flow import (
    build_category_rows,
    build_sankey_figure,
    build_sankey_model,
)
from src.application.errors import LedgerUnavailableError
from src.domain.models import (
    AllocationEntry,
    DashboardKpis,
    IncomeExpenseFlow,
    InvestmentPortfolio,
    NetWorthTimeSeries,
    PortfolioValuePoint,
)
from src.infrastructure.container import (
    build_flow_use_case,
    build_history_use_case,
    build_kpis_use_case,
    build_net_worth_use_case,
    build_portfolio_use_case,
)
from src.infrastructure.logging.logger import get_usage_logger


PAGES = ["Overview", "Investments", "Cash Flow"]
PERIODS = ["1Y", "YTD", "QTD", "MTD", "All Time"]

_PALETTE = [
    "#1b9aaa",
    "#2e7d32",
    "#f4a261",
    "#e76f51",
    "#457b9d",
    "#f6c453",
    "#6c8ead",
    "#a0c4ff",
]
_CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def _check_altair_dependencies() -> tuple[bool, str | None]:
    """Check that the numpy/pandas builds Altair relies on are usable.

    Returns:
        Tuple of (ok, message); message explains the broken import.
    """
    try:
        import numpy
        import pandas
    except ImportError as exc:
        return False, f"Altair dependencies are missing: {exc}"
    if not hasattr(numpy, "ndarray"):
        return False, (
            "numpy is installed but does not expose ndarray; "
            "reinstall numpy to render charts."
        )
    if not hasattr(pandas, "Timestamp"):
        return False, (
            "pandas is installed but does not expose Timestamp; "
            "reinstall pandas to render charts."
        )
    return True, None


def _fetch_kpis(start_date: date | None, end_date: date) -> DashboardKpis:
    """Fetch headline KPIs for the selected period."""
    use_case = build_kpis_use_case()
    return use_case.execute(start_date=start_date, end_date=end_date)


@st.cache_data(show_spinner=False)
def _load_kpis(
    start_date: date | None,
    end_date: date,
    schema_version: int = 1,
) -> DashboardKpis:
    """Cached wrapper around _fetch_kpis."""
    _ = schema_version
    return _fetch_kpis(start_date, end_date)


def _fetch_net_worth_series(
    start_date: date | None,
    end_date: date,
) -> NetWorthTimeSeries:
    """Fetch the monthly net worth series."""
    use_case = build_net_worth_use_case()
    return use_case.execute(start_date=start_date, end_date=end_date)


@st.cache_data(show_spinner=False)
def _load_net_worth_series(
    start_date: date | None,
    end_date: date,
    schema_version: int = 1,
) -> NetWorthTimeSeries:
    """Cached wrapper around _fetch_net_worth_series."""
    _ = schema_version
    return _fetch_net_worth_series(start_date, end_date)


def _fetch_portfolio(as_of: date, include_closed: bool) -> InvestmentPortfolio:
    """Fetch holdings, allocation and cash analysis."""
    use_case = build_portfolio_use_case()
    return use_case.execute(as_of=as_of, include_closed=include_closed)


@st.cache_data(show_spinner=False)
def _load_portfolio(
    as_of: date,
    include_closed: bool = False,
    schema_version: int = 1,
) -> InvestmentPortfolio:
    """Cached wrapper around _fetch_portfolio."""
    _ = schema_version
    return _fetch_portfolio(as_of, include_closed)


def _fetch_investment_history(
    days: int,
    end_date: date,
) -> list[PortfolioValuePoint]:
    """Fetch the portfolio value history."""
    use_case = build_history_use_case()
    return use_case.execute(days=days, end_date=end_date)


@st.cache_data(show_spinner=False)
def _load_investment_history(
    days: int,
    end_date: date,
    schema_version: int = 1,
) -> list[PortfolioValuePoint]:
    """Cached wrapper around _fetch_investment_history."""
    _ = schema_version
    return _fetch_investment_history(days, end_date)


def _fetch_income_expense_flow(
    start_date: date | None,
    end_date: date,
) -> IncomeExpenseFlow:
    """Fetch income and expense totals with the Sankey graph."""
    use_case = build_flow_use_case()
    return use_case.execute(start_date=start_date, end_date=end_date)


@st.cache_data(show_spinner=False)
def _load_income_expense_flow(
    start_date: date | None,
    end_date: date,
    schema_version: int = 1,
) -> IncomeExpenseFlow:
    """Cached wrapper around _fetch_income_expense_flow."""
    _ = schema_version
    return _fetch_income_expense_flow(start_date, end_date)


def _format_currency(value: Decimal, currency_code: str) -> str:
    """Format currency values for display."""
    symbol = _CURRENCY_SYMBOLS.get(currency_code, currency_code)
    return f"{value:,.2f} {symbol}"


def _format_delta(value: Decimal) -> str:
    """Format delta values for display."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:,.2f}"


def _format_delta_with_percent(delta: Decimal, percent: float) -> str:
    """Format delta value with an already computed percentage change."""
    if not percent:
        return _format_delta(delta)
    sign = "+" if percent >= 0 else ""
    return f"{_format_delta(delta)} ({sign}{percent:.2f}%)"


def _format_percent(value: float) -> str:
    return f"{value:.2f}%"


def _get_period_start(
    period: str,
    today: date,
) -> date | None:
    """Return the start date for the selected period."""
    if period == "All Time":
        return None
    if period == "1Y":
        return today - timedelta(days=365)
    if period == "YTD":
        return date(today.year, 1, 1)
    if period == "MTD":
        return date(today.year, today.month, 1)
    if period == "QTD":
        quarter = (today.month - 1) // 3
        start_month = quarter * 3 + 1
        return date(today.year, start_month, 1)
    return None


def _period_days(start_date: date | None, today: date) -> int:
    """Return the history window length for a period start."""
    if start_date is None:
        return 365 * 10
    return max((today - start_date).days, 1)


def _prepare_net_worth_chart_data(
    series: NetWorthTimeSeries,
) -> list[dict[str, str | float]]:
    """Flatten the net worth series into long-form Altair rows."""
    data: list[dict[str, str | float]] = []
    for point in series.points:
        day = point.date.isoformat()
        data.append({"date": day, "series": "Net Worth", "value": float(point.net_worth)})
        data.append({"date": day, "series": "Assets", "value": float(point.assets)})
        data.append({"date": day, "series": "Liabilities", "value": float(point.liabilities)})
    return data


def _render_net_worth_chart(series: NetWorthTimeSeries) -> None:
    """Render net worth, assets and liabilities over time."""
    st.subheader(f"Net Worth Over Time ({series.currency_code})")
    if not series.points:
        st.info("No net worth history available for this period.")
        return
    chart = alt.Chart(
        alt.Data(values=_prepare_net_worth_chart_data(series))
    ).mark_line(point=True).encode(
        x=alt.X("date:T", title=None),
        y=alt.Y("value:Q", title=None),
        color=alt.Color(
            "series:N",
            scale=alt.Scale(range=["#1b9aaa", "#2e7d32", "#e76f51"]),
            legend=alt.Legend(orient="bottom", title=None),
        ),
        tooltip=[
            alt.Tooltip("date:T"),
            alt.Tooltip("series:N"),
            alt.Tooltip("value:Q", format=",.2f"),
        ],
    ).properties(height=360)
    st.altair_chart(chart, width="stretch")


def _prepare_donut_chart_data(
    allocation: Sequence[AllocationEntry],
    currency_code: str,
    max_categories: int = 6,
) -> tuple[list[dict[str, str | float]], Decimal]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        allocation: Allocation entries, largest first.
        currency_code: Currency used for amount labels.
        max_categories: Maximum categories to keep before grouping into Other.

    Returns:
        Tuple with Altair-ready chart data and the total amount.
    """
    sorted_items = sorted(allocation, key=lambda item: item.value, reverse=True)
    top_items = [(item.category, item.value) for item in sorted_items[:max_categories]]
    other_amount = sum(
        (item.value for item in sorted_items[max_categories:]),
        start=Decimal("0"),
    )
    if other_amount != 0:
        top_items.append(("Other", other_amount))
    total_amount = sum((item.value for item in sorted_items), start=Decimal("0"))
    data: list[dict[str, str | float]] = []
    for category, amount in top_items:
        share = (amount / total_amount) * Decimal("100") if total_amount else Decimal("0")
        data.append(
            {
                "category": category,
                "amount": float(amount),
                "amount_label": _format_currency(amount, currency_code),
                "share_label": f"{share:.1f}%",
            }
        )
    return data, total_amount


def _render_allocation_chart(
    portfolio: InvestmentPortfolio,
    chart_size: int = 320,
    max_categories: int = 6,
) -> None:
    """Render a donut chart of market value by account category."""
    st.subheader("Allocation by Account")
    if not portfolio.allocation:
        st.info("No holdings available for the allocation chart.")
        return
    data, _ = _prepare_donut_chart_data(
        portfolio.allocation,
        portfolio.currency_code,
        max_categories=max_categories,
    )
    hover = alt.selection_point(
        name="hover",
        fields=["category"],
        on="view:mouseover",
        clear="view:mouseout",
        empty=False,
    )
    base = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
        stroke="#0f1115",
        strokeWidth=2,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "category:N",
            scale=alt.Scale(range=_PALETTE),
            legend=alt.Legend(orient="bottom", title=None, columns=2, labelLimit=180),
        ),
        opacity=alt.condition(hover, alt.value(1.0), alt.value(0.25)),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    )
    hover_text = alt.Chart(alt.Data(values=data)).transform_filter(
        hover
    ).mark_text(
        align="center",
        baseline="middle",
        fontSize=16,
        fontWeight="bold",
        color="#f5f7ff",
    ).encode(text="amount_label:N")
    chart = alt.layer(base, hover_text).add_params(hover).properties(
        width=chart_size,
        height=chart_size,
    ).configure_view(stroke=None)
    st.altair_chart(chart, width="stretch")


def _render_sector_chart(portfolio: InvestmentPortfolio) -> None:
    """Render sector exposure as horizontal bars."""
    st.subheader("Sector Exposure")
    if not portfolio.sector_exposure:
        st.info("No sector metadata available.")
        return
    data = [
        {
            "sector": entry.sector,
            "percent": entry.percent,
            "value_label": _format_currency(entry.value, portfolio.currency_code),
        }
        for entry in portfolio.sector_exposure
    ]
    chart = alt.Chart(alt.Data(values=data)).mark_bar(
        cornerRadiusEnd=4,
        color="#457b9d",
    ).encode(
        x=alt.X("percent:Q", title="% of portfolio"),
        y=alt.Y("sector:N", sort="-x", title=None),
        tooltip=[
            alt.Tooltip("sector:N"),
            alt.Tooltip("value_label:N"),
            alt.Tooltip("percent:Q", format=".2f"),
        ],
    ).properties(height=max(160, 28 * len(data)))
    st.altair_chart(chart, width="stretch")


def _render_history_chart(
    history: Sequence[PortfolioValuePoint],
    currency_code: str,
) -> None:
    st.subheader(f"Portfolio Value ({currency_code})")
    if not history:
        st.info("No price history available for this period.")
        return
    data = [
        {"date": point.date.isoformat(), "value": float(point.value)}
        for point in history
    ]
    chart = alt.Chart(alt.Data(values=data)).mark_area(
        line={"color": "#1b9aaa"},
        color="#1b9aaa",
        opacity=0.35,
    ).encode(
        x=alt.X("date:T", title=None),
        y=alt.Y("value:Q", title=None),
        tooltip=[alt.Tooltip("date:T"), alt.Tooltip("value:Q", format=",.2f")],
    ).properties(height=280)
    st.altair_chart(chart, width="stretch")


def _holdings_table_rows(
    portfolio: InvestmentPortfolio,
) -> list[dict[str, str | float]]:
    """Return display rows for consolidated holdings."""
    code = portfolio.currency_code
    return [
        {
            "Symbol": holding.symbol,
            "Name": holding.fullname,
            "Shares": float(holding.total_shares),
            "Price": float(holding.latest_price),
            "Price Date": holding.price_date.isoformat() if holding.price_date else "",
            "Cost Basis": _format_currency(holding.total_cost_basis, code),
            "Market Value": _format_currency(holding.total_market_value, code),
            "Gain/Loss": _format_delta(holding.total_gain_loss),
            "Gain/Loss %": _format_percent(holding.total_gain_loss_percent),
            "Accounts": len(holding.accounts),
        }
        for holding in portfolio.consolidated_holdings
    ]


def _cash_table_rows(
    portfolio: InvestmentPortfolio,
) -> list[dict[str, str | float]]:
    """Return display rows for the per-account cash analysis."""
    code = portfolio.currency_code
    return [
        {
            "Account": entry.parent_path or entry.parent_name,
            "Cash": _format_currency(entry.cash_balance, code),
            "Investments": _format_currency(entry.investment_value, code),
            "Cash %": _format_percent(entry.cash_percent),
            "Risk": entry.risk_level,
        }
        for entry in portfolio.cash_by_account
    ]


def _render_overview(start_date: date | None, today: date) -> None:
    """Render KPIs and the net worth trend."""
    kpis = _load_kpis(start_date, today)
    code = kpis.currency_code
    net_worth_col, income_col, expenses_col, savings_col = st.columns(4)
    net_worth_col.metric(
        "Net Worth",
        _format_currency(kpis.net_worth, code),
        _format_delta_with_percent(
            kpis.net_worth_change,
            kpis.net_worth_change_percent,
        ),
    )
    income_col.metric("Income", _format_currency(kpis.total_income, code))
    expenses_col.metric("Expenses", _format_currency(kpis.total_expenses, code))
    savings_col.metric("Savings Rate", _format_percent(kpis.savings_rate))
    st.caption(
        f"{kpis.start_date.isoformat()} to {kpis.end_date.isoformat()} · "
        f"Top expense: {kpis.top_expense_category} "
        f"({_format_currency(kpis.top_expense_amount, code)}) · "
        f"Investments: {_format_currency(kpis.investment_value, code)}"
    )
    _render_net_worth_chart(_load_net_worth_series(start_date, today))


def _render_investments(start_date: date | None, today: date) -> None:
    """Render holdings, allocation, sector exposure and cash analysis."""
    include_closed = st.sidebar.checkbox("Show closed positions", value=False)
    portfolio = _load_portfolio(today, include_closed)
    code = portfolio.currency_code
    summary = portfolio.summary
    value_col, cost_col, gain_col, cash_col = st.columns(4)
    value_col.metric("Market Value", _format_currency(summary.total_value, code))
    cost_col.metric("Cost Basis", _format_currency(summary.total_cost_basis, code))
    gain_col.metric(
        "Unrealized Gain",
        _format_currency(summary.total_gain_loss, code),
        _format_percent(summary.total_gain_loss_percent),
    )
    cash_col.metric(
        "Cash Share",
        _format_percent(portfolio.overall_cash.cash_percent),
        portfolio.overall_cash.risk_level,
        delta_color="off",
    )

    if not portfolio.holdings:
        st.warning("No investment holdings found.")
        return

    st.subheader("Holdings")
    st.dataframe(_holdings_table_rows(portfolio), width="stretch", hide_index=True)

    chart_left, chart_right = st.columns(2)
    with chart_left:
        _render_allocation_chart(portfolio)
    with chart_right:
        _render_sector_chart(portfolio)

    history = _load_investment_history(_period_days(start_date, today), today)
    _render_history_chart(history, code)

    st.subheader("Cash by Account")
    st.dataframe(_cash_table_rows(portfolio), width="stretch", hide_index=True)


def _render_cash_flow(start_date: date | None, today: date) -> None:
    """Render income and expense totals with the Sankey diagram."""
    flow = _load_income_expense_flow(start_date, today)
    code = flow.currency_code
    income_col, expenses_col, savings_col = st.columns(3)
    income_col.metric("Income", _format_currency(flow.total_income, code))
    expenses_col.metric("Expenses", _format_currency(flow.total_expenses, code))
    savings_col.metric("Savings", _format_currency(flow.savings, code))
    st.caption(f"{flow.start_date.isoformat()} to {flow.end_date.isoformat()}")

    model = build_sankey_model(flow)
    if model.is_empty:
        st.info("No income or expense activity in this period.")
        return
    st.plotly_chart(build_sankey_figure(model), width="stretch")
    if flow.max_depth > 1:
        with st.expander("Sub-category breakdown"):
            rows = build_category_rows(flow.income, "Income")
            rows.extend(build_category_rows(flow.expenses, "Expense"))
            st.dataframe(rows, width="stretch", hide_index=True)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="GnuCash Dashboard", layout="wide")
    st.title("GnuCash Dashboard")

    ok, message = _check_altair_dependencies()
    if not ok:
        st.error(message)
        return

    page = st.sidebar.selectbox("Page", PAGES)
    period = st.sidebar.selectbox("Period", PERIODS)
    today = date.today()
    start_date = _get_period_start(period, today)
    get_usage_logger().info("page=%s period=%s", page, period)

    try:
        if page == "Investments":
            _render_investments(start_date, today)
        elif page == "Cash Flow":
            _render_cash_flow(start_date, today)
        else:
            _render_overview(start_date, today)
    except LedgerUnavailableError as exc:
        st.error(f"GnuCash ledger unavailable: {exc}")


if __name__ == "__main__":  # pragma: no cover
    main()
