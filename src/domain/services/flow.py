"""Income to expense flow aggregation for Sankey charts.

Links apportion each expense category across income sources in
proportion to each source's share of total income. They describe how the
budget splits on average, not which transactions paid for what.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from logging import Logger

from src.domain.constants import (
    EXPENSE_TYPE,
    INCOME_TYPE,
    OTHER_EXPENSES_LABEL,
    OTHER_INCOME_LABEL,
    SAVINGS_LABEL,
)
from src.domain.models import (
    CategoryTotal,
    FlowGraph,
    FlowLink,
    FlowNode,
    IncomeExpenseFlow,
    SplitRow,
)
from src.domain.services.account_tree import AccountTree
from src.domain.services.fx import CurrencyConverter
from src.domain.services.rational import rational_to_decimal
from src.utils.decimal_utils import round_money


def sum_split_totals(
    splits: Iterable[SplitRow],
    account_currency: Mapping[str, str | None],
    converter: CurrencyConverter,
    as_of: date,
) -> dict[str, Decimal]:
    """Sum split quantities per account, converted into the base currency.

    Foreign accounts are converted at the single rate in force at
    ``as_of``.
    """
    totals: dict[str, Decimal] = {}
    for split in splits:
        amount = rational_to_decimal(split.quantity_num, split.quantity_denom)
        currency_guid = account_currency.get(split.account_guid)
        converted = converter.convert(amount, currency_guid, as_of)
        totals[split.account_guid] = totals.get(split.account_guid, Decimal("0")) + converted
    return totals


def _category_node(
    tree: AccountTree,
    guid: str,
    name: str,
    split_totals: Mapping[str, Decimal],
    sign: Decimal,
    depth: int,
    seen: set[str],
) -> tuple[CategoryTotal, Decimal]:
    seen.add(guid)
    raw = split_totals.get(guid, Decimal("0"))
    children = []
    for child in tree.children(guid):
        if child.guid in seen:
            continue
        node, child_raw = _category_node(
            tree, child.guid, child.name, split_totals, sign, depth + 1, seen
        )
        raw += child_raw
        if node.value > 0:
            children.append(node)
    node = CategoryTotal(guid, name, round_money(raw * sign), depth, tuple(children))
    return node, raw


def build_category_totals(
    tree: AccountTree,
    parent_guid: str,
    split_totals: Mapping[str, Decimal],
    negate: bool,
    other_label: str,
) -> list[CategoryTotal]:
    """Total each child category of a top-level account.

    Each category includes its whole subtree and keeps its positive
    sub-categories as nested ``children``. Splits posted on the top-level
    account itself go to an ``other_label`` bucket. Totals that are zero
    or negative after sign correction are dropped at every level.

    Args:
        tree: Account hierarchy.
        parent_guid: Top-level Income or Expense account.
        split_totals: Base-currency total per account GUID.
        negate: Whether ledger signs are flipped (income is negative).
        other_label: Name of the uncategorized bucket.

    Returns:
        list[CategoryTotal]: Positive category totals, rounded to cents.
    """
    sign = Decimal("-1") if negate else Decimal("1")
    seen = {parent_guid}
    categories = []
    for child in tree.children(parent_guid):
        node, _ = _category_node(
            tree, child.guid, child.name, split_totals, sign, 0, seen
        )
        if node.value > 0:
            categories.append(node)
    other = round_money(split_totals.get(parent_guid, Decimal("0")) * sign)
    if other > 0:
        categories.append(CategoryTotal(None, other_label, other))
    return categories


def build_flow_graph(
    income: list[CategoryTotal],
    expenses: list[CategoryTotal],
    savings: Decimal,
) -> FlowGraph:
    """Build Sankey nodes and proportional links.

    Each income source sends ``expense * (source / total income)`` to
    every expense category and the same share of savings to the savings
    node. Links that round to zero or below are omitted.
    """
    nodes = [FlowNode(category.name, "income") for category in income]
    nodes.extend(FlowNode(category.name, "expense") for category in expenses)
    targets = list(expenses)
    if savings > 0:
        nodes.append(FlowNode(SAVINGS_LABEL, "savings"))
        targets.append(CategoryTotal(None, SAVINGS_LABEL, savings))

    total_income = sum((category.value for category in income), Decimal("0"))
    links: list[FlowLink] = []
    if total_income <= 0:
        return FlowGraph(nodes, links)
    offset = len(income)
    for source_index, source in enumerate(income):
        share = source.value / total_income
        for target_offset, target in enumerate(targets):
            value = round_money(target.value * share)
            if value > 0:
                links.append(FlowLink(source_index, offset + target_offset, value))
    return FlowGraph(nodes, links)


def aggregate_income_expense_flow(
    tree: AccountTree,
    split_totals: Mapping[str, Decimal],
    currency_code: str,
    start_date: date,
    end_date: date,
    logger: Logger | None = None,
) -> IncomeExpenseFlow:
    """Aggregate income and expense categories for a reporting window.

    Args:
        tree: Hierarchy of visible accounts.
        split_totals: Base-currency total per account for the window.
        currency_code: Base currency mnemonic.
        start_date: First day of the window.
        end_date: Last day of the window.
        logger: Optional logger.

    Returns:
        IncomeExpenseFlow: Categories, totals, savings and flow graph.
    """
    income_parents = tree.top_level(INCOME_TYPE)
    expense_parents = tree.top_level(EXPENSE_TYPE)
    income: list[CategoryTotal] = []
    expenses: list[CategoryTotal] = []
    if income_parents:
        income = build_category_totals(
            tree, income_parents[0].guid, split_totals, True, OTHER_INCOME_LABEL
        )
    elif logger:
        logger.warning("No top-level income account found")
    if expense_parents:
        expenses = build_category_totals(
            tree, expense_parents[0].guid, split_totals, False, OTHER_EXPENSES_LABEL
        )
    elif logger:
        logger.warning("No top-level expense account found")

    total_income = sum((category.value for category in income), Decimal("0"))
    total_expenses = sum((category.value for category in expenses), Decimal("0"))
    savings = round_money(total_income - total_expenses)
    return IncomeExpenseFlow(
        currency_code=currency_code,
        start_date=start_date,
        end_date=end_date,
        income=income,
        expenses=expenses,
        total_income=total_income,
        total_expenses=total_expenses,
        savings=savings,
        graph=build_flow_graph(income, expenses, savings),
    )


__all__ = [
    "sum_split_totals",
    "build_category_totals",
    "build_flow_graph",
    "aggregate_income_expense_flow",
]
