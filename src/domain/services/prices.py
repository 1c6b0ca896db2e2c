"""Point-in-time price lookup over dated price series."""

from bisect import bisect_right
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from logging import Logger

from src.domain.models import PriceRow
from src.domain.services.rational import rational_to_decimal


@dataclass(frozen=True)
class PricePoint:
    """Value of a commodity on a given date."""

    date: date
    value: Decimal


class DatedSeries:
    """Dated values answering "latest on or before" queries."""

    def __init__(self, points: Iterable[PricePoint]) -> None:
        ordered = sorted(points, key=lambda point: point.date)
        self._dates = [point.date for point in ordered]
        self._points = ordered

    def __len__(self) -> int:
        return len(self._points)

    def latest_on_or_before(self, as_of: date) -> PricePoint | None:
        """Return the newest point dated on or before ``as_of``."""
        index = bisect_right(self._dates, as_of)
        if index == 0:
            return None
        return self._points[index - 1]

    @property
    def dates(self) -> list[date]:
        return list(self._dates)

    def oldest(self) -> PricePoint | None:
        """Return the earliest point, if any."""
        return self._points[0] if self._points else None

    def newest_first(self) -> list[PricePoint]:
        """Return points sorted by date, newest first."""
        return list(reversed(self._points))


class PriceOracle:
    """Resolve commodity prices as of a date, never looking ahead.

    A commodity without a price on or before the requested date is worth
    zero at that date.
    """

    def __init__(self, series: Mapping[str, Iterable[PricePoint]]) -> None:
        self._series = {
            commodity_guid: DatedSeries(points)
            for commodity_guid, points in series.items()
        }

    @classmethod
    def from_price_rows(
        cls, rows: Iterable[PriceRow], logger: Logger | None = None
    ) -> "PriceOracle":
        """Build an oracle from raw price rows.

        Args:
            rows: Price rows for any commodities.
            logger: Optional logger for malformed rows.

        Returns:
            PriceOracle: Oracle keyed by commodity GUID.
        """
        grouped: dict[str, list[PricePoint]] = defaultdict(list)
        for row in rows:
            if row.date is None:
                if logger:
                    logger.warning(
                        f"Skipping price without date for {row.commodity_guid}"
                    )
                continue
            if not row.value_denom and logger:
                logger.warning(
                    f"Price denominator is zero for {row.commodity_guid} "
                    f"on {row.date}; using 0"
                )
            grouped[row.commodity_guid].append(
                PricePoint(row.date, rational_to_decimal(row.value_num, row.value_denom))
            )
        return cls(grouped)

    def commodities(self) -> list[str]:
        """Return the commodity GUIDs that have at least one price."""
        return list(self._series)

    def latest_price_point(self, commodity_guid: str, as_of: date) -> PricePoint | None:
        """Return the newest price point dated on or before ``as_of``."""
        series = self._series.get(commodity_guid)
        if series is None:
            return None
        return series.latest_on_or_before(as_of)

    def latest_price_as_of(self, commodity_guid: str, as_of: date) -> Decimal:
        """Return the newest price on or before ``as_of``, or zero."""
        point = self.latest_price_point(commodity_guid, as_of)
        return point.value if point else Decimal("0")

    def price_dates(self, commodity_guids: Iterable[str] | None = None) -> list[date]:
        """Return distinct price dates, ascending.

        Args:
            commodity_guids: Restrict to these commodities when given.
        """
        guids = self._series if commodity_guids is None else commodity_guids
        dates: set[date] = set()
        for guid in guids:
            series = self._series.get(guid)
            if series is not None:
                dates.update(series.dates)
        return sorted(dates)


__all__ = ["PricePoint", "DatedSeries", "PriceOracle"]
