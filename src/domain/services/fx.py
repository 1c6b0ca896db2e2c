"""Currency conversion into the base currency."""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from logging import Logger

from src.domain.models import PriceRow
from src.domain.services.prices import DatedSeries, PricePoint
from src.domain.services.rational import rational_to_decimal


def build_rate_table(
    base_currency_guid: str,
    price_rows: Iterable[PriceRow],
    currency_guids: Iterable[str] | None = None,
    logger: Logger | None = None,
) -> dict[str, list[PricePoint]]:
    """Build base-currency exchange rates per foreign currency.

    Direct quotes (foreign priced in base) are used as-is. Inverse quotes
    (base priced in foreign) fill in 1/value for dates without a direct
    quote on that same date. Inverse quotes of zero are skipped.

    Args:
        base_currency_guid: GUID of the reporting currency.
        price_rows: Price rows for currencies, in any order.
        currency_guids: Foreign currencies of interest; all when None.
        logger: Optional logger for skipped quotes.

    Returns:
        dict[str, list[PricePoint]]: Rates per currency, newest first.
    """
    wanted = set(currency_guids) if currency_guids is not None else None

    def is_wanted(guid: str | None) -> bool:
        if not guid or guid == base_currency_guid:
            return False
        return wanted is None or guid in wanted

    direct: dict[str, list[PricePoint]] = defaultdict(list)
    inverse: dict[str, list[PricePoint]] = defaultdict(list)
    for row in price_rows:
        if row.date is None:
            continue
        if row.currency_guid == base_currency_guid and is_wanted(row.commodity_guid):
            direct[row.commodity_guid].append(
                PricePoint(row.date, rational_to_decimal(row.value_num, row.value_denom))
            )
        elif row.commodity_guid == base_currency_guid and is_wanted(row.currency_guid):
            value = rational_to_decimal(row.value_num, row.value_denom)
            if value == 0:
                if logger:
                    logger.warning(
                        f"Skipping zero inverse rate for {row.currency_guid} on {row.date}"
                    )
                continue
            inverse[row.currency_guid].append(PricePoint(row.date, Decimal(1) / value))

    table: dict[str, list[PricePoint]] = {}
    for currency_guid in set(direct) | set(inverse):
        rates = list(direct.get(currency_guid, []))
        direct_dates = {point.date for point in rates}
        rates.extend(
            point for point in inverse.get(currency_guid, []) if point.date not in direct_dates
        )
        table[currency_guid] = sorted(rates, key=lambda point: point.date, reverse=True)
    return table


class CurrencyConverter:
    """Convert foreign-currency amounts into the base currency.

    Rate lookups return the newest rate dated on or before the requested
    date. When every rate is later than the date, the oldest rate is used.
    A currency without any rate converts at 1.
    """

    def __init__(
        self,
        base_currency_guid: str,
        rates: Mapping[str, Iterable[PricePoint]] | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._base_currency_guid = base_currency_guid
        self._logger = logger
        self._rates = {
            currency_guid: DatedSeries(points)
            for currency_guid, points in (rates or {}).items()
        }
        self._missing_reported: set[str] = set()

    @classmethod
    def from_price_rows(
        cls,
        base_currency_guid: str,
        price_rows: Iterable[PriceRow],
        currency_guids: Iterable[str] | None = None,
        logger: Logger | None = None,
    ) -> "CurrencyConverter":
        """Build a converter from raw price rows."""
        table = build_rate_table(base_currency_guid, price_rows, currency_guids, logger)
        return cls(base_currency_guid, table, logger)

    @property
    def base_currency_guid(self) -> str:
        return self._base_currency_guid

    def has_rates(self, currency_guid: str) -> bool:
        """Return True when at least one rate exists for the currency."""
        series = self._rates.get(currency_guid)
        return bool(series)

    def rate_as_of(self, currency_guid: str | None, as_of: date) -> Decimal:
        """Return the base-currency rate for one unit of ``currency_guid``."""
        if not currency_guid or currency_guid == self._base_currency_guid:
            return Decimal("1")
        series = self._rates.get(currency_guid)
        if not series:
            if self._logger and currency_guid not in self._missing_reported:
                self._missing_reported.add(currency_guid)
                self._logger.warning(
                    f"No exchange rate for currency {currency_guid}; using 1"
                )
            return Decimal("1")
        point = series.latest_on_or_before(as_of)
        if point is None:
            point = series.oldest()
        return point.value

    def convert(self, amount: Decimal, currency_guid: str | None, as_of: date) -> Decimal:
        """Convert ``amount`` from ``currency_guid`` into the base currency."""
        return amount * self.rate_as_of(currency_guid, as_of)


__all__ = ["build_rate_table", "CurrencyConverter"]
