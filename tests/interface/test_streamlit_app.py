"""Tests for the Streamlit app module."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from src.adapters.interface.streamlit import app
from src.application.errors import LedgerUnavailableError
from src.domain.models import (
    AllocationEntry,
    CategoryTotal,
    DashboardKpis,
    IncomeExpenseFlow,
    InvestmentPortfolio,
    NetWorthPoint,
    NetWorthTimeSeries,
    OverallCash,
    PortfolioSummary,
)
from src.domain.services.flow import build_flow_graph


class _FakeSidebar:
    def __init__(self, selections: dict[str, str]) -> None:
        self._selections = selections

    def selectbox(self, label, options, **_kwargs):
        return self._selections.get(label, options[0])

    def checkbox(self, _label, value=False, **_kwargs):
        return value


class _FakeStreamlit:
    def __init__(self, page: str = "Overview", period: str = "YTD") -> None:
        self.sidebar = _FakeSidebar({"Page": page, "Period": period})
        self.config_called = False
        self.title_text = None
        self.metrics: list[tuple] = []
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.infos: list[str] = []
        self.charts: list[object] = []
        self.plotly_figures: list[object] = []
        self.dataframes: list[tuple] = []

    def set_page_config(self, **kwargs):
        self.config_called = True
        self.config_kwargs = kwargs

    def title(self, text: str):
        self.title_text = text

    def columns(self, count: int):
        return [self] * count

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        return False

    def metric(self, label, value, delta=None, **_kwargs):
        self.metrics.append((label, value, delta))

    def caption(self, _text: str):
        return None

    def subheader(self, _text: str):
        return None

    def error(self, text: str):
        self.errors.append(text)

    def warning(self, text: str):
        self.warnings.append(text)

    def info(self, text: str):
        self.infos.append(text)

    def altair_chart(self, chart, **_kwargs):
        self.charts.append(chart)

    def plotly_chart(self, figure, **_kwargs):
        self.plotly_figures.append(figure)

    def dataframe(self, data, **kwargs):
        self.dataframes.append((data, kwargs))


def _kpis() -> DashboardKpis:
    return DashboardKpis(
        currency_code="USD",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 2, 1),
        net_worth=Decimal("400.00"),
        net_worth_change=Decimal("100.00"),
        net_worth_change_percent=33.33,
        total_income=Decimal("1000.00"),
        total_expenses=Decimal("700.00"),
        savings_rate=30.0,
        top_expense_category="Food",
        top_expense_amount=Decimal("400.00"),
        investment_value=Decimal("600.00"),
    )


def _series() -> NetWorthTimeSeries:
    return NetWorthTimeSeries(
        "USD",
        [
            NetWorthPoint(date(2024, 1, 31), Decimal("300"), Decimal("700"), Decimal("-400")),
            NetWorthPoint(date(2024, 2, 1), Decimal("400"), Decimal("800"), Decimal("-400")),
        ],
    )


def _flow() -> IncomeExpenseFlow:
    income = [CategoryTotal("s", "Salary", Decimal("1000"))]
    expenses = [CategoryTotal("f", "Food", Decimal("400"))]
    return IncomeExpenseFlow(
        currency_code="USD",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 2, 1),
        income=income,
        expenses=expenses,
        total_income=Decimal("1000"),
        total_expenses=Decimal("400"),
        savings=Decimal("600"),
        graph=build_flow_graph(income, expenses, Decimal("600")),
    )


def _empty_portfolio() -> InvestmentPortfolio:
    return InvestmentPortfolio(
        currency_code="USD",
        as_of=date(2024, 2, 1),
        summary=PortfolioSummary(Decimal("0"), Decimal("0"), Decimal("0"), 0.0),
        holdings=[],
        consolidated_holdings=[],
        allocation=[],
        cash_by_account=[],
        overall_cash=OverallCash(Decimal("0"), Decimal("0"), Decimal("0"), 0.0, "low"),
        sector_exposure=[],
    )


def _patch_runtime(monkeypatch, fake_st) -> None:
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(app, "_check_altair_dependencies", lambda: (True, None))
    monkeypatch.setattr(app, "get_usage_logger", lambda: MagicMock())


def test_fetch_kpis_invokes_use_case(monkeypatch):
    """_fetch_kpis should build the use case and forward the dates."""
    calls = {}

    class _FakeUseCase:
        def execute(self, start_date, end_date):
            calls["dates"] = (start_date, end_date)
            return "kpis"

    monkeypatch.setattr(app, "build_kpis_use_case", lambda: _FakeUseCase())

    result = app._fetch_kpis(date(2024, 1, 1), date(2024, 2, 1))

    assert result == "kpis"
    assert calls["dates"] == (date(2024, 1, 1), date(2024, 2, 1))


def test_load_income_expense_flow_uses_fetch(monkeypatch):
    """The cached loader should delegate to its fetch function."""
    monkeypatch.setattr(app, "_fetch_income_expense_flow", lambda start, end: "cached")

    assert app._load_income_expense_flow(None, date(2031, 5, 17), schema_version=99) == "cached"


def test_main_renders_overview(monkeypatch):
    """The overview shows KPI metrics and the net worth chart."""
    fake_st = _FakeStreamlit(page="Overview")
    _patch_runtime(monkeypatch, fake_st)
    monkeypatch.setattr(app, "_load_kpis", lambda start, end: _kpis())
    monkeypatch.setattr(app, "_load_net_worth_series", lambda start, end: _series())

    app.main()

    assert fake_st.config_called
    assert fake_st.title_text == "GnuCash Dashboard"
    labels = [metric[0] for metric in fake_st.metrics]
    assert labels == ["Net Worth", "Income", "Expenses", "Savings Rate"]
    assert fake_st.metrics[0][2] == "+100.00 (+33.33%)"
    assert len(fake_st.charts) == 1
    assert fake_st.errors == []


def test_main_renders_cash_flow_sankey(monkeypatch):
    """The cash flow page renders one Plotly Sankey."""
    fake_st = _FakeStreamlit(page="Cash Flow")
    _patch_runtime(monkeypatch, fake_st)
    monkeypatch.setattr(app, "_load_income_expense_flow", lambda start, end: _flow())

    app.main()

    assert len(fake_st.plotly_figures) == 1
    assert [metric[0] for metric in fake_st.metrics] == ["Income", "Expenses", "Savings"]


def test_main_warns_without_holdings(monkeypatch):
    """An empty portfolio is a warning, not an error."""
    fake_st = _FakeStreamlit(page="Investments")
    _patch_runtime(monkeypatch, fake_st)
    monkeypatch.setattr(
        app, "_load_portfolio", lambda as_of, include_closed: _empty_portfolio()
    )

    app.main()

    assert fake_st.warnings == ["No investment holdings found."]
    assert fake_st.errors == []


def test_main_reports_unavailable_ledger(monkeypatch):
    """Ledger failures are shown as an explicit error."""
    fake_st = _FakeStreamlit(page="Overview")
    _patch_runtime(monkeypatch, fake_st)

    def _raise(start, end):
        raise LedgerUnavailableError("database is down")

    monkeypatch.setattr(app, "_load_kpis", _raise)

    app.main()

    assert len(fake_st.errors) == 1
    assert "database is down" in fake_st.errors[0]


def test_main_stops_when_chart_dependencies_are_broken(monkeypatch):
    """A broken numpy/pandas install stops rendering with an error."""
    fake_st = _FakeStreamlit()
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(
        app, "_check_altair_dependencies", lambda: (False, "numpy is broken")
    )

    app.main()

    assert fake_st.errors == ["numpy is broken"]
    assert fake_st.metrics == []


def test_get_period_start():
    """Period shortcuts map to their first day."""
    today = date(2024, 5, 17)

    assert app._get_period_start("YTD", today) == date(2024, 1, 1)
    assert app._get_period_start("QTD", today) == date(2024, 4, 1)
    assert app._get_period_start("MTD", today) == date(2024, 5, 1)
    assert app._get_period_start("1Y", today) == date(2023, 5, 18)
    assert app._get_period_start("All Time", today) is None


def test_prepare_donut_chart_data_groups_other():
    """Categories past the limit are grouped into Other."""
    allocation = [
        AllocationEntry("Brokerage", Decimal("500"), 50.0),
        AllocationEntry("IRA", Decimal("300"), 30.0),
        AllocationEntry("HSA", Decimal("200"), 20.0),
    ]

    data, total = app._prepare_donut_chart_data(allocation, "USD", max_categories=2)

    assert total == Decimal("1000")
    assert [row["category"] for row in data] == ["Brokerage", "IRA", "Other"]
    assert data[2]["amount_label"] == "200.00 $"
    assert data[0]["share_label"] == "50.0%"
