"""Use case to report transactions whose splits do not balance."""

from dataclasses import dataclass
from datetime import date

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.ledger_data import LedgerReader
from src.domain.services import find_unbalanced_transactions
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class LedgerBalanceReport:
    """Outcome of the zero-sum check over a window."""

    start_date: date | None
    end_date: date | None
    transaction_count: int
    unbalanced_transactions: list[str]

    @property
    def is_balanced(self) -> bool:
        return not self.unbalanced_transactions


class CheckLedgerBalanceUseCase:
    """Check that every transaction's split values sum to zero."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        logger=None,
        base_currency: str = "USD",
    ) -> None:
        self._logger = logger or get_app_logger()
        self._reader = LedgerReader(ledger_repository, self._logger)
        self._base_currency = base_currency

    def execute(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> LedgerBalanceReport:
        """Return the unbalanced transactions posted in a window.

        Every account is included so each transaction is seen with all of
        its splits. Offenders are logged, never corrected.
        """
        reference = self._reader.load_reference(self._base_currency)
        splits = self._reader.fetch_splits(
            [account.guid for account in reference.accounts],
            start_date,
            end_date,
        )
        unbalanced = find_unbalanced_transactions(splits, self._logger)
        transaction_count = len({split.tx_guid for split in splits if split.tx_guid})
        if unbalanced:
            self._logger.warning(
                f"{len(unbalanced)} of {transaction_count} transactions are unbalanced"
            )
        else:
            self._logger.info(f"All {transaction_count} transactions balance")
        return LedgerBalanceReport(
            start_date=start_date,
            end_date=end_date,
            transaction_count=transaction_count,
            unbalanced_transactions=unbalanced,
        )


__all__ = ["LedgerBalanceReport", "CheckLedgerBalanceUseCase"]
