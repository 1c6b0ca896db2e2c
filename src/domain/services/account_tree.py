"""Account hierarchy lookups: children, descendants and paths."""

from collections import defaultdict
from collections.abc import Iterable
from logging import Logger

from src.domain.constants import ROOT_TYPE
from src.domain.models import AccountDTO


class AccountTree:
    """Adjacency view over a flat list of accounts.

    Paths are colon-joined account names from the ROOT account down to
    the node, so a stock two levels below ROOT reads
    ``Root Account:Assets:AAPL``. A parent reference that does not resolve
    ends the walk and yields a partial path.
    """

    def __init__(self, accounts: Iterable[AccountDTO], logger: Logger | None = None) -> None:
        self._logger = logger
        self._accounts: dict[str, AccountDTO] = {}
        self._children: dict[str | None, list[AccountDTO]] = defaultdict(list)
        for account in accounts:
            self._accounts[account.guid] = account
        for account in self._accounts.values():
            self._children[account.parent_guid].append(account)
        self._paths: dict[str, str] = {}

    def __contains__(self, guid: object) -> bool:
        return guid in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def accounts(self) -> list[AccountDTO]:
        """Return every account in insertion order."""
        return list(self._accounts.values())

    def get(self, guid: str | None) -> AccountDTO | None:
        """Return the account for ``guid``, if known."""
        if guid is None:
            return None
        return self._accounts.get(guid)

    def children(self, guid: str | None) -> list[AccountDTO]:
        """Return direct children of ``guid``."""
        return list(self._children.get(guid, []))

    def roots(self) -> list[AccountDTO]:
        """Return ROOT-type accounts."""
        return [
            account
            for account in self._accounts.values()
            if account.account_type == ROOT_TYPE
        ]

    def top_level(self, account_type: str) -> list[AccountDTO]:
        """Return top-level accounts of a type, directly under a ROOT.

        Template roots are ignored by only considering the first ROOT that
        has children of the requested type.
        """
        for root in self.roots():
            matches = [
                child
                for child in self.children(root.guid)
                if child.account_type == account_type
            ]
            if matches:
                return matches
        return []

    def descendants(self, guid: str, include_self: bool = True) -> list[str]:
        """Return GUIDs of every account below ``guid``.

        Args:
            guid: Account to start from.
            include_self: Whether ``guid`` itself is part of the result.

        Returns:
            list[str]: Account GUIDs in depth-first order.
        """
        result: list[str] = []
        seen: set[str] = set()
        stack = [guid]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            if current != guid or include_self:
                result.append(current)
            children = self._children.get(current, [])
            stack.extend(child.guid for child in reversed(children))
        return result

    def path(self, guid: str) -> str:
        """Return the colon-joined path of names for ``guid``."""
        cached = self._paths.get(guid)
        if cached is not None:
            return cached
        names: list[str] = []
        seen: set[str] = set()
        current = self._accounts.get(guid)
        while current is not None:
            if current.guid in seen:
                if self._logger:
                    self._logger.warning(f"Cycle in account parents at {current.guid}")
                break
            seen.add(current.guid)
            names.append(current.name)
            parent_guid = current.parent_guid
            if parent_guid is None:
                break
            parent = self._accounts.get(parent_guid)
            if parent is None and self._logger:
                self._logger.debug(
                    f"Parent {parent_guid} of {current.guid} not found; path is partial"
                )
            current = parent
        path = ":".join(reversed(names))
        self._paths[guid] = path
        return path


__all__ = ["AccountTree"]
