"""Domain models for ledger accounts."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AccountDTO:
    """Serializable representation of a ledger account."""

    guid: str
    name: str
    account_type: str
    commodity_guid: str | None
    parent_guid: str | None
    hidden: bool = False


__all__ = ["AccountDTO"]
