"""Ledger consistency checks."""

from collections.abc import Iterable
from fractions import Fraction
from logging import Logger

from src.domain.models import SplitRow
from src.domain.services.rational import rational_to_fraction


def find_unbalanced_transactions(
    splits: Iterable[SplitRow], logger: Logger | None = None
) -> list[str]:
    """Return transactions whose split values do not sum to zero.

    Values are compared as exact fractions. Offenders are reported and
    left untouched.

    Args:
        splits: Splits of any transactions.
        logger: Optional logger receiving one warning per offender.

    Returns:
        list[str]: GUIDs of unbalanced transactions, in first-seen order.
    """
    totals: dict[str, Fraction] = {}
    for split in splits:
        if split.tx_guid is None:
            continue
        totals[split.tx_guid] = totals.get(split.tx_guid, Fraction(0)) + rational_to_fraction(
            split.value_num, split.value_denom
        )
    unbalanced = [tx_guid for tx_guid, total in totals.items() if total != 0]
    if logger:
        for tx_guid in unbalanced:
            logger.warning(
                f"Transaction {tx_guid} is unbalanced by {float(totals[tx_guid]):.2f}"
            )
    return unbalanced


__all__ = ["find_unbalanced_transactions"]
