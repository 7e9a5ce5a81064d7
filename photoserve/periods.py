"""Date periods of posts: parsing, titles, grouping and the related redirects."""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import TypeVar

from .shared import RequestError

T = TypeVar("T")

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

DAY_FORMAT = "January 2"
FULL_FORMAT = "January 2, 2006"

_DAY = timedelta(hours=24)
_SECOND = timedelta(seconds=1)
_ISO_DATE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_TWO_DIGITS = re.compile(r"[0-9]{2}")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
# a leap year, so that February 29 is accepted when no year is given
_ANY_YEAR = 2000


def _format_date(moment: datetime, layout: str) -> str:
    month_day = f"{MONTHS[moment.month - 1]} {moment.day}"
    if layout == DAY_FORMAT:
        return month_day
    if layout == FULL_FORMAT:
        return f"{month_day}, {moment.year:04d}"
    raise ValueError(f"unsupported date layout: {layout}")


@dataclass(frozen=True)
class Period:
    """A span of days to list posts for, with how to present it."""

    start: datetime
    end: datetime
    title: str
    time_format: str
    show_dates: bool


def _parse_day(text: str) -> datetime:
    match = _ISO_DATE.fullmatch(text)
    if match is None:
        raise RequestError("invalid from date format", HTTPStatus.BAD_REQUEST)
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        raise RequestError("invalid from date format", HTTPStatus.BAD_REQUEST) from None


def period_title(start: datetime, end: datetime) -> str:
    """Heading for the posts published between `start` and `end`."""
    if start + _DAY >= end:
        return f"Posts from {_format_date(start, FULL_FORMAT)}"
    if start.year == end.year:
        if start.month == end.month:
            return f"Posts from {MONTHS[start.month - 1]} {start.day}-{end.day}, {start.year}"
        return (
            f"Posts from {_format_date(start, DAY_FORMAT)} "
            f"to {_format_date(end, DAY_FORMAT)}, {start.year}"
        )
    return f"Posts from {_format_date(start, FULL_FORMAT)} to {_format_date(end, FULL_FORMAT)}"


def parse_period(from_string: str | None, to_string: str | None = None) -> Period:
    """Build the period from a YYYY-MM-DD start and an optional inclusive end day."""
    if from_string is None:
        raise RequestError("from param required", HTTPStatus.BAD_REQUEST)

    start = _parse_day(from_string)
    end = start + _DAY
    if to_string is not None:
        end = _parse_day(to_string) + _DAY - _SECOND

    time_format = DAY_FORMAT if start.year == end.year else FULL_FORMAT
    return Period(
        start=start,
        end=end,
        title=period_title(start, end),
        time_format=time_format,
        show_dates=start + _DAY < end,
    )


def group_by_date(
    items: Iterable[T],
    key: Callable[[T], datetime],
    time_format: str = DAY_FORMAT,
) -> dict[str, list[T]]:
    """Group items by their formatted date, keeping first-seen order of the groups."""
    groups: dict[str, list[T]] = {}
    for item in items:
        groups.setdefault(_format_date(key(item), time_format), []).append(item)
    return groups


def _on_this_day_path(month: int, day: int) -> str:
    return f"/posts/on-this-day/{MONTHS[month - 1]}-{day}"


def legacy_period_redirect(month: str | None, day: str | None) -> str:
    """Map a legacy /archive/MM-DD address to its on-this-day page."""
    if month is None or day is None:
        raise RequestError("failed to parse legacy archive URL")
    if not (_TWO_DIGITS.fullmatch(month) and _TWO_DIGITS.fullmatch(day)):
        raise RequestError("failed to parse date in legacy URL")
    month_number, day_number = int(month), int(day)
    if not 1 <= month_number <= 12:
        raise RequestError("failed to parse date in legacy URL")
    if not 1 <= day_number <= calendar.monthrange(_ANY_YEAR, month_number)[1]:
        raise RequestError("failed to parse date in legacy URL")
    return _on_this_day_path(month_number, day_number)


def parse_on_this_day(month: str | None, day: str | None) -> tuple[int, int] | None:
    """Read a month name and a day number; None when either is missing or malformed."""
    if month is None or day is None:
        return None
    if not _INTEGER.fullmatch(day):
        return None
    day_number = int(day)
    if not _INT64_MIN <= day_number <= _INT64_MAX:
        return None
    wanted = month.lower()
    for number, name in enumerate(MONTHS, start=1):
        if name.lower() == wanted:
            return number, day_number
    return None


def period_index_redirect(from_string: str | None, to_string: str | None = "") -> str | None:
    """Where the period form submits to, or None when there is no start to go to."""
    if not from_string:
        return None
    if to_string:
        return f"/posts/period/{from_string}-to-{to_string}"
    return "/posts/period/" + from_string