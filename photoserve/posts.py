"""Post listing helpers: search cleaning, paging, legacy redirects and the latest-post payload."""

from __future__ import annotations

import json
import re
from datetime import datetime, timedelta, timezone

from .shared import RequestError

PAGE_SIZE = 42
SITE_URL = "https://photos.example.com"

_NOT_WORD_OR_SPACE = re.compile(r"[^0-9A-Za-z_\t\n\f\r ]+")
_SPACE_RUN = re.compile(r"[\t\n\f\r ]+")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def clean_search_query(query: str) -> str:
    """Drop everything but ASCII word characters and whitespace, collapsing runs of space."""
    cleaned = _NOT_WORD_OR_SPACE.sub("", query)
    return _SPACE_RUN.sub(" ", cleaned)


def page_from_param(param: str | None) -> int | None:
    """Page number requested by the `page` query parameter.

    An empty or unparsable value means the first page. A number below 2
    returns None: the request should be redirected to the bare index.
    """
    if not param:
        return 1
    if not _INTEGER.fullmatch(param):
        return 1
    value = int(param)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return 1
    if value < 2:
        return None
    return value


def last_page(count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of the last index page for `count` posts."""
    if page_size <= 0:
        raise ValueError("page size must be positive")
    return count // page_size + 1


def legacy_post_redirect(date: str | None) -> str:
    """Map an old post address, identified by its date, to that day's period page."""
    if date is None:
        raise RequestError("failed to parse date from legacy URL")
    return "/posts/period/" + date


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    offset = moment.utcoffset() or timedelta(0)
    stamp = f"{moment.year:04d}-{moment:%m-%dT%H:%M:%S}"
    if offset == timedelta(0):
        return stamp + "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = int(abs(offset).total_seconds()) // 60
    return f"{stamp}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def latest_payload(location_name: str, post_id: int, publish_date: datetime) -> str:
    """JSON document describing the most recent post, newline terminated."""
    document = json.dumps(
        {
            "location": location_name,
            "url": f"{SITE_URL}/posts/{post_id}",
            "created_at": _rfc3339(publish_date),
        },
        separators=(",", ":"),
        ensure_ascii=False,
    )
    for char, escape in _JSON_ESCAPES.items():
        document = document.replace(char, escape)
    return document + "\n"