"""Income/expense Sankey presentation logic for the Streamlit UI.

This module turns an ``IncomeExpenseFlow`` produced by
``GetIncomeExpenseFlowUseCase`` into a Sankey model and a Plotly figure.
It performs no IO.

The layout has two columns: income categories on the left, expense
categories and savings on the right.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from src.domain.models import CategoryTotal, IncomeExpenseFlow

if TYPE_CHECKING:  # pragma: no cover
    import plotly.graph_objects as go


INCOME_COLOR = "#2e7d32"
EXPENSE_COLOR = "#e76f51"
SAVINGS_COLOR = "#1b9aaa"

_NODE_COLORS = {
    "income": INCOME_COLOR,
    "expense": EXPENSE_COLOR,
    "savings": SAVINGS_COLOR,
}


@dataclass(frozen=True)
class SankeyModel:
    """Plotly-ready Sankey arrays with stable node indices."""

    node_labels: list[str]
    node_colors: list[str]
    node_x: list[float]
    node_y: list[float]
    sources: list[int]
    targets: list[int]
    values: list[Decimal]

    @property
    def is_empty(self) -> bool:
        return not self.values


def _column_positions(count: int) -> list[float]:
    return [(index + 1) / (count + 1) for index in range(count)]


def build_sankey_model(flow: IncomeExpenseFlow) -> SankeyModel:
    """Build Sankey arrays from a flow graph.

    Args:
        flow: Aggregated income and expense flow.

    Returns:
        SankeyModel: Labels carry the node value, left nodes are income.
    """
    nodes = flow.graph.nodes
    values_by_name = {category.name: category.value for category in flow.income}
    values_by_name.update({category.name: category.value for category in flow.expenses})

    labels = []
    for node in nodes:
        value = flow.savings if node.kind == "savings" else values_by_name.get(node.name)
        labels.append(f"{node.name} ({value:,.2f})" if value is not None else node.name)

    left = [index for index, node in enumerate(nodes) if node.kind == "income"]
    right = [index for index, node in enumerate(nodes) if node.kind != "income"]
    node_x = [0.0] * len(nodes)
    node_y = [0.5] * len(nodes)
    for index, y in zip(left, _column_positions(len(left))):
        node_x[index] = 0.02
        node_y[index] = y
    for index, y in zip(right, _column_positions(len(right))):
        node_x[index] = 0.98
        node_y[index] = y

    return SankeyModel(
        node_labels=labels,
        node_colors=[_NODE_COLORS.get(node.kind, EXPENSE_COLOR) for node in nodes],
        node_x=node_x,
        node_y=node_y,
        sources=[link.source for link in flow.graph.links],
        targets=[link.target for link in flow.graph.links],
        values=[link.value for link in flow.graph.links],
    )


def build_category_rows(categories: Iterable[CategoryTotal], side: str) -> list[dict[str, object]]:
    """Flatten nested categories into indented table rows, parents first."""
    rows: list[dict[str, object]] = []
    stack = list(reversed(list(categories)))
    while stack:
        category = stack.pop()
        rows.append(
            {
                "Side": side,
                "Category": "    " * category.depth + category.name,
                "Level": category.depth + 1,
                "Value": float(category.value),
            }
        )
        stack.extend(reversed(category.children))
    return rows


def build_sankey_figure(model: SankeyModel) -> "go.Figure":
    """Render a Sankey model as a Plotly figure."""
    import plotly.graph_objects as go

    fig = go.Figure(
        data=[
            go.Sankey(
                arrangement="snap",
                node=dict(
                    pad=12,
                    thickness=14,
                    label=model.node_labels,
                    color=model.node_colors,
                    x=model.node_x,
                    y=model.node_y,
                    line=dict(color="rgba(0,0,0,0.25)", width=0.5),
                ),
                link=dict(
                    source=model.sources,
                    target=model.targets,
                    value=[float(value) for value in model.values],
                ),
                textfont=dict(size=12),
            )
        ]
    )
    fig.update_layout(margin=dict(l=8, r=8, t=8, b=8), height=620)
    return fig


__all__ = [
    "INCOME_COLOR",
    "EXPENSE_COLOR",
    "SAVINGS_COLOR",
    "SankeyModel",
    "build_sankey_model",
    "build_category_rows",
    "build_sankey_figure",
]
