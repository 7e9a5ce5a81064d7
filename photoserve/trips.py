"""Date handling for trip pages."""

from __future__ import annotations

from datetime import datetime, timedelta

from .periods import MONTHS

_DAY = timedelta(hours=24)
_SECOND = timedelta(seconds=1)


def _month_day(moment: datetime) -> str:
    return f"{MONTHS[moment.month - 1]} {moment.day}"


def _full_date(moment: datetime) -> str:
    return f"{_month_day(moment)}, {moment.year:04d}"


def trip_range_end(end_date: datetime) -> datetime:
    """The last second of the trip's final day."""
    return end_date + _DAY - _SECOND


def trip_date_title(start_date: datetime, end_date: datetime) -> str:
    """Heading describing the days a trip covers."""
    if start_date.month == end_date.month:
        return f"{_month_day(start_date)}-{end_date.day}, {end_date.year:04d}"
    if start_date.year != end_date.year:
        return f"{_full_date(start_date)} - {_full_date(end_date)}"
    return f"{_month_day(start_date)} - {_full_date(end_date)}"


def trip_show_dates(start_date: datetime, end_date: datetime) -> bool:
    """Whether the trip spans more than a day, so posts are shown under dates."""
    return start_date + _DAY < trip_range_end(end_date)