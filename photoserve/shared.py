"""Request helpers shared by the public handlers: ids, content types, icons, redirects."""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from http import HTTPStatus

VALID_ICON_RESIZES = frozenset({"100x", "200x", "500x", "1000x"})

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class RequestError(Exception):
    """A request could not be served; carries the HTTP status to answer with."""

    def __init__(self, message: str, status: int = HTTPStatus.INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.message = message
        self.status = HTTPStatus(status)


def parse_id_from_path(params: Mapping[str, str], param_name: str) -> int:
    """Read a signed 64-bit integer id from the matched path parameters."""
    try:
        raw = params[param_name]
    except KeyError:
        raise RequestError(f"{param_name} is required") from None

    if not _INTEGER.fullmatch(raw):
        raise RequestError(f"{param_name} was not integer")
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise RequestError(f"{param_name} was not integer")
    return value


def _header(headers: Mapping[str, object], name: str) -> str | None:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, str):
            return value
        values = list(value)  # type: ignore[call-overload]
        return values[0] if values else ""
    return None


def validate_content_type(headers: Mapping[str, object], expected: str) -> None:
    """Raise RequestError unless the first Content-Type value is exactly `expected`."""
    content_type = _header(headers, "Content-Type")
    if content_type is None:
        raise RequestError("Content-Type must be set", HTTPStatus.BAD_REQUEST)
    if content_type != expected:
        raise RequestError(f"Content-Type must be {expected}", HTTPStatus.BAD_REQUEST)


def redirect_handler(path: str) -> Callable[[dict, Callable], Iterable[bytes]]:
    """Build a WSGI app that answers every request with a 303 to `path`."""

    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        status = HTTPStatus.SEE_OTHER
        headers = [("Location", path)]
        body = b""
        if environ.get("REQUEST_METHOD", "GET") in ("GET", "HEAD"):
            headers.append(("Content-Type", "text/html; charset=utf-8"))
            body = f'<a href="{html.escape(path)}">{status.phrase}</a>.\n'.encode()
        start_response(f"{status.value} {status.phrase}", headers)
        return [body]

    return app


@dataclass(frozen=True)
class DeviceIcon:
    """Storage locations of a device's icon."""

    id: int
    slug: str
    icon_kind: str

    def icon_path(self) -> str:
        return f"device_icons/{self.slug}.{self.icon_kind}"

    def thumb_path(self, resize: str) -> str:
        return f"thumbs/device_icons/{self.id}-{resize}.{self.icon_kind}"


@dataclass(frozen=True)
class LensIcon:
    """Storage locations of a lens's icon."""

    id: int

    def icon_path(self) -> str:
        return f"lens_icons/{self.id}.png"

    def thumb_path(self, resize: str) -> str:
        return f"thumbs/lens_icons/{self.id}-{resize}.png"


def icon_content_type(icon_path: str) -> str:
    """Pick the image content type from the icon's file extension."""
    if icon_path[-3:] == "png" and len(icon_path) >= 3:
        return "image/png"
    return "image/jpeg"


def validate_icon_resize(resize: str) -> str:
    """Return the resize option if it is empty or allowed, else raise a 400."""
    if resize and resize not in VALID_ICON_RESIZES:
        raise RequestError("Invalid resize parameter", HTTPStatus.BAD_REQUEST)
    return resize