"""SQLAlchemy-backed repository reading the GnuCash schema."""

from collections.abc import Iterable
from datetime import date, timedelta

from sqlalchemy import bindparam, text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.models import AccountDTO, CommodityRow, PriceRow, SplitRow
from src.infrastructure.logging.logger import get_app_logger
from src.utils.date_utils import coerce_date


class SqlAlchemyLedgerRepository(LedgerRepositoryPort):
    """Repository running raw SQL against a GnuCash SQL book."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the GnuCash engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def _fetch_all(self, query, params: dict | None = None) -> list:
        engine = self._db_port.get_gnucash_engine()
        with engine.connect() as conn:
            return conn.execute(query, params or {}).all()

    def fetch_base_currency(self, mnemonic: str) -> CommodityRow:
        query = text(
            """
            SELECT guid, namespace, mnemonic, fullname, fraction
            FROM commodities
            WHERE UPPER(namespace) IN ('CURRENCY', 'ISO4217')
            ORDER BY CASE WHEN mnemonic = :currency THEN 0 ELSE 1 END, mnemonic
            LIMIT 1
            """
        )
        rows = self._fetch_all(query, {"currency": mnemonic})
        if not rows:
            raise RuntimeError(f"Missing currency in commodities: {mnemonic}")
        currency = self._to_commodity(rows[0])
        if currency.mnemonic != mnemonic:
            self._logger.warning(
                f"Currency {mnemonic} not found; reporting in {currency.mnemonic}"
            )
        return currency

    def fetch_accounts(self) -> list[AccountDTO]:
        query = text(
            """
            SELECT guid, name, account_type, commodity_guid, parent_guid, hidden
            FROM accounts
            """
        )
        return [
            AccountDTO(
                guid=row.guid,
                name=row.name,
                account_type=row.account_type,
                commodity_guid=row.commodity_guid,
                parent_guid=row.parent_guid,
                hidden=bool(row.hidden),
            )
            for row in self._fetch_all(query)
        ]

    def fetch_commodities(self) -> list[CommodityRow]:
        query = text(
            """
            SELECT guid, namespace, mnemonic, fullname, fraction
            FROM commodities
            """
        )
        return [self._to_commodity(row) for row in self._fetch_all(query)]

    def fetch_splits(
        self,
        account_guids: Iterable[str],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[SplitRow]:
        guids = list(account_guids)
        if not guids:
            return []
        query, params = self._build_splits_query(guids, start_date, end_date)
        return [
            SplitRow(
                tx_guid=row.tx_guid,
                account_guid=row.account_guid,
                value_num=int(row.value_num),
                value_denom=int(row.value_denom),
                quantity_num=int(row.quantity_num),
                quantity_denom=int(row.quantity_denom),
                post_date=coerce_date(row.post_date),
            )
            for row in self._fetch_all(query, params)
        ]

    def fetch_prices(
        self, commodity_guids: Iterable[str] | None = None
    ) -> list[PriceRow]:
        sql = """
        SELECT commodity_guid, currency_guid, value_num, value_denom, date
        FROM prices
        """
        params: dict = {}
        guids = list(commodity_guids) if commodity_guids is not None else None
        if guids is not None:
            if not guids:
                return []
            sql += " WHERE commodity_guid IN :commodity_guids"
            params["commodity_guids"] = guids
        sql += " ORDER BY commodity_guid, date DESC"
        query = text(sql)
        if guids is not None:
            query = query.bindparams(bindparam("commodity_guids", expanding=True))
        return [
            PriceRow(
                commodity_guid=row.commodity_guid,
                currency_guid=row.currency_guid,
                value_num=int(row.value_num),
                value_denom=int(row.value_denom),
                date=coerce_date(row.date),
            )
            for row in self._fetch_all(query, params)
        ]

    @staticmethod
    def _to_commodity(row) -> CommodityRow:
        return CommodityRow(
            guid=row.guid,
            namespace=row.namespace,
            mnemonic=row.mnemonic,
            fullname=row.fullname,
            fraction=int(row.fraction or 100),
        )

    @staticmethod
    def _build_splits_query(
        account_guids: list[str],
        start_date: date | None,
        end_date: date | None,
    ):
        base_sql = """
        SELECT s.tx_guid AS tx_guid,
               s.account_guid AS account_guid,
               s.value_num AS value_num,
               s.value_denom AS value_denom,
               s.quantity_num AS quantity_num,
               s.quantity_denom AS quantity_denom,
               t.post_date AS post_date
        FROM splits s
        JOIN transactions t ON t.guid = s.tx_guid
        WHERE s.account_guid IN :account_guids
        """
        params: dict = {"account_guids": account_guids}
        if start_date:
            base_sql += " AND t.post_date >= :start_date"
            params["start_date"] = start_date
        if end_date:
            # post_date is a timestamp; keep the whole end day.
            base_sql += " AND t.post_date < :end_before"
            params["end_before"] = end_date + timedelta(days=1)
        base_sql += " ORDER BY t.post_date"
        query = text(base_sql).bindparams(
            bindparam("account_guids", expanding=True)
        )
        return query, params


__all__ = ["SqlAlchemyLedgerRepository"]
