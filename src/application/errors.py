"""Application-level errors."""


class LedgerUnavailableError(RuntimeError):
    """Raised when no ledger data can be read at all.

    Distinct from an empty but valid portfolio, which is a normal result.
    """


__all__ = ["LedgerUnavailableError"]
