"""Template helper functions and the combined stylesheet."""

from __future__ import annotations

import hashlib
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

_DAY = timedelta(days=1)


def _format_float(value: float) -> str:
    """Format a float as the shortest %g-style text, exponent from 1e6 up."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    prefix = "-" if value < 0 else ""
    number = Decimal(repr(abs(value))).normalize()
    _, digits, exponent = number.as_tuple()
    exp = len(digits) + exponent - 1
    if exp < -4 or exp >= 6:
        text = "".join(map(str, digits))
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        sign = "-" if exp < 0 else "+"
        return f"{prefix}{mantissa}e{sign}{abs(exp):02d}"
    return prefix + format(number, "f")


def to_string(value: object) -> str:
    """Render a value as plain text the way templates display it."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda item: to_string(item[0]))
        return "map[" + " ".join(f"{to_string(k)}:{to_string(v)}" for k, v in items) + "]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(to_string(item) for item in value) + "]"
    return str(value)


def truncate(text: str, length: int, ellipsis: bool) -> str:
    """Cut text to `length` characters, optionally marking the cut."""
    if len(text) < length:
        return text
    return text[:length] + "..." if ellipsis else text[:length]


def display_offset(width: int, height: int, offset: int) -> str:
    """CSS object-position for a media item cropped into a square."""
    x, y = 50, 50
    if width > height:
        x, y = offset, 0
    elif width < height:
        x, y = 0, offset
    return f"{x}% {y}%"


def _day_start(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def days_diff(t1: datetime, t2: datetime) -> str:
    """Number of whole calendar days between two moments, as 'N days'."""
    days = abs(math.ceil((_day_start(t2) - _day_start(t1)) / _DAY))
    return f"{_format_float(float(days))} days"


@dataclass(frozen=True)
class StyleSheet:
    """The site's concatenated CSS and its cache-busting ETag."""

    content: str
    etag: str


def _as_text(data: str | bytes) -> str:
    return data.decode("utf-8") if isinstance(data, bytes) else data


def build_stylesheet(normalize: str | bytes, tachyons: str | bytes, site: str | bytes) -> StyleSheet:
    """Join the three stylesheets, each followed by a newline, and hash the result."""
    content = "".join(_as_text(part) + "\n" for part in (normalize, tachyons, site))
    etag = hashlib.sha1(content.encode("utf-8"), usedforsecurity=False).hexdigest()
    return StyleSheet(content, etag)


def styles_handler(stylesheet: StyleSheet) -> Callable[[dict, Callable], Iterable[bytes]]:
    """Build a WSGI app that serves the stylesheet."""
    body = stylesheet.content.encode("utf-8")

    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        start_response(
            "200 OK",
            [
                ("Cache-Control", "public, max-age=60"),
                ("Content-Type", "text/css"),
                ("ETag", stylesheet.etag),
                ("Content-Length", str(len(body))),
            ],
        )
        return [body]

    return app