"""Date helpers shared by repositories and valuation services."""

import calendar
from datetime import date, datetime


def coerce_date(value) -> date | None:
    """Normalize date-like values to ``date``.

    Args:
        value: ``date``, ``datetime``, ISO string or None.

    Returns:
        date | None: Calendar date, or None when the value is empty.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    return datetime.fromisoformat(text[:19].replace(" ", "T")).date()


def month_end(value: date) -> date:
    """Return the last calendar day of the month containing ``value``."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return date(value.year, value.month, last_day)


def generate_monthly_date_points(start_date: date, end_date: date) -> list[date]:
    """Return month-end date points between two dates.

    The last point is capped at ``end_date``, so a window ending mid-month
    is valued at its end date rather than at the month end.

    Args:
        start_date: First day of the reporting window.
        end_date: Last day of the reporting window.

    Returns:
        list[date]: Ascending date points, empty when start is after end.
    """
    if start_date > end_date:
        return []
    points = []
    year, month = start_date.year, start_date.month
    while (year, month) <= (end_date.year, end_date.month):
        point = month_end(date(year, month, 1))
        points.append(min(point, end_date))
        month += 1
        if month > 12:
            year += 1
            month = 1
    return points


__all__ = ["coerce_date", "month_end", "generate_monthly_date_points"]
