"""PieCash-backed repository reading a GnuCash book file."""

from collections.abc import Iterable
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from fractions import Fraction
from pathlib import Path

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.constants import CURRENCY_NAMESPACE
from src.domain.models import AccountDTO, CommodityRow, PriceRow, SplitRow
from src.domain.services.normalization import normalize_namespace
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.piecash_compat import load_piecash, open_piecash_book
from src.utils.date_utils import coerce_date


class PieCashLedgerRepository(LedgerRepositoryPort):
    """Repository reading ledger rows through piecash objects."""

    def __init__(self, book_path: Path | str, logger=None) -> None:
        """Initialize the repository.

        Args:
            book_path: Path or URI to the GnuCash book supported by piecash.
            logger: Optional logger compatible with logging.Logger-like API.

        Raises:
            RuntimeError: If piecash is not installed.
        """
        try:
            self._piecash = load_piecash()
        except ImportError as exc:
            raise RuntimeError(
                "piecash is not installed; install it to use the piecash backend"
            ) from exc
        self._book_path = book_path
        self._logger = logger or get_app_logger()

    @contextmanager
    def _open_book(self):
        book = open_piecash_book(self._piecash, self._book_path)
        try:
            yield book
        finally:
            close_method = getattr(book, "close", None)
            if callable(close_method):
                close_method()

    @staticmethod
    def _normalize_account_type(raw_type) -> str:
        if raw_type is None:
            return ""
        if hasattr(raw_type, "name"):
            return str(raw_type.name).upper()
        return str(raw_type).upper()

    @staticmethod
    def _rational(obj, field: str) -> tuple[int, int]:
        """Return ``(num, denom)`` for a piecash numeric field.

        Raw ``<field>_num``/``<field>_denom`` columns are used when exposed;
        otherwise the Decimal property is converted exactly.
        """
        for prefix in ("_", ""):
            num = getattr(obj, f"{prefix}{field}_num", None)
            denom = getattr(obj, f"{prefix}{field}_denom", None)
            if isinstance(num, int) and isinstance(denom, int):
                return num, denom
        value = getattr(obj, field, None)
        if value is None:
            return 0, 1
        if isinstance(value, Fraction):
            return value.numerator, value.denominator
        return Decimal(str(value)).as_integer_ratio()

    @staticmethod
    def _to_commodity(commodity) -> CommodityRow:
        return CommodityRow(
            guid=commodity.guid,
            namespace=commodity.namespace,
            mnemonic=commodity.mnemonic,
            fullname=getattr(commodity, "fullname", None),
            fraction=int(getattr(commodity, "fraction", None) or 100),
        )

    def fetch_base_currency(self, mnemonic: str) -> CommodityRow:
        with self._open_book() as book:
            currencies = [
                self._to_commodity(commodity)
                for commodity in book.commodities
                if normalize_namespace(commodity.namespace) == CURRENCY_NAMESPACE
            ]
        if not currencies:
            raise RuntimeError(f"Missing currency in commodities: {mnemonic}")
        for commodity in currencies:
            if commodity.mnemonic == mnemonic:
                return commodity
        fallback = min(currencies, key=lambda commodity: commodity.mnemonic or "")
        self._logger.warning(
            f"Currency {mnemonic} not found; reporting in {fallback.mnemonic}"
        )
        return fallback

    def fetch_accounts(self) -> list[AccountDTO]:
        with self._open_book() as book:
            accounts = list(book.accounts)
            root = getattr(book, "root_account", None)
            if root is not None and all(account.guid != root.guid for account in accounts):
                accounts.insert(0, root)
            return [
                AccountDTO(
                    guid=account.guid,
                    name=account.name,
                    account_type=self._normalize_account_type(
                        getattr(account, "type", None)
                    ),
                    commodity_guid=(
                        account.commodity.guid
                        if getattr(account, "commodity", None) is not None
                        else None
                    ),
                    parent_guid=(
                        account.parent.guid
                        if getattr(account, "parent", None) is not None
                        else None
                    ),
                    hidden=bool(getattr(account, "hidden", False)),
                )
                for account in accounts
            ]

    def fetch_commodities(self) -> list[CommodityRow]:
        with self._open_book() as book:
            return [self._to_commodity(commodity) for commodity in book.commodities]

    def fetch_splits(
        self,
        account_guids: Iterable[str],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[SplitRow]:
        wanted = set(account_guids)
        rows: list[SplitRow] = []
        if not wanted:
            return rows
        with self._open_book() as book:
            for split in book.splits:
                account = split.account
                if account is None or account.guid not in wanted:
                    continue
                transaction = getattr(split, "transaction", None)
                post_date = coerce_date(getattr(transaction, "post_date", None))
                if start_date and (post_date is None or post_date < start_date):
                    continue
                if end_date and (post_date is None or post_date > end_date):
                    continue
                value_num, value_denom = self._rational(split, "value")
                quantity_num, quantity_denom = self._rational(split, "quantity")
                rows.append(
                    SplitRow(
                        tx_guid=getattr(transaction, "guid", None),
                        account_guid=account.guid,
                        value_num=value_num,
                        value_denom=value_denom,
                        quantity_num=quantity_num,
                        quantity_denom=quantity_denom,
                        post_date=post_date,
                    )
                )
        rows.sort(key=lambda row: (row.post_date is None, row.post_date or date.min))
        return rows

    def fetch_prices(
        self, commodity_guids: Iterable[str] | None = None
    ) -> list[PriceRow]:
        wanted = set(commodity_guids) if commodity_guids is not None else None
        rows: list[PriceRow] = []
        with self._open_book() as book:
            for price in book.prices:
                commodity = getattr(price, "commodity", None)
                if commodity is None:
                    continue
                if wanted is not None and commodity.guid not in wanted:
                    continue
                price_date = coerce_date(getattr(price, "date", None))
                if price_date is None:
                    self._logger.warning(
                        f"Skipping price without date for {commodity.mnemonic}"
                    )
                    continue
                currency = getattr(price, "currency", None)
                value_num, value_denom = self._rational(price, "value")
                rows.append(
                    PriceRow(
                        commodity_guid=commodity.guid,
                        currency_guid=currency.guid if currency is not None else None,
                        value_num=value_num,
                        value_denom=value_denom,
                        date=price_date,
                    )
                )
        rows.sort(key=lambda row: (row.commodity_guid, row.date), reverse=True)
        return rows


__all__ = ["PieCashLedgerRepository"]
