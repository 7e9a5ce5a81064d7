"""WSGI middleware: HTTPS redirection and request logging."""

from __future__ import annotations

import html
import io
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from http import HTTPStatus
from urllib.parse import parse_qs, quote, urlsplit, urlunsplit

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]

_FORM_TYPE = "application/x-www-form-urlencoded"


def _request_target(environ: dict) -> str:
    target = environ.get("RAW_URI") or environ.get("REQUEST_URI")
    if not target:
        target = quote(environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""))
        if environ.get("QUERY_STRING"):
            target += "?" + environ["QUERY_STRING"]
    return target


def https_middleware(hostname: str, environment: str) -> Callable[[WSGIApp], WSGIApp]:
    """Redirect plain-HTTP production requests to https://hostname:443."""

    def wrap(app: WSGIApp) -> WSGIApp:
        def secured(environ: dict, start_response: Callable) -> Iterable[bytes]:
            host = environ.get("HTTP_HOST") or environ.get("SERVER_NAME", "")
            if (
                environment != "production"
                or host.startswith("localhost")
                or environ.get("HTTP_X_FORWARDED_PROTO") == "https"
            ):
                return app(environ, start_response)

            try:
                parts = urlsplit(_request_target(environ))
                target = urlunsplit(
                    ("https", f"{hostname}:443", parts.path, parts.query, parts.fragment)
                )
            except ValueError as exc:
                start_response("400 Bad Request", [("Content-Type", "text/plain; charset=utf-8")])
                return [str(exc).encode()]

            status = HTTPStatus.PERMANENT_REDIRECT
            headers = [("Strict-Transport-Security", "max-age=3600"), ("Location", target)]
            body = b""
            if environ.get("REQUEST_METHOD", "GET") in ("GET", "HEAD"):
                headers.append(("Content-Type", "text/html; charset=utf-8"))
                body = f'<a href="{html.escape(target)}">{status.phrase}</a>.\n'.encode()
            start_response(f"{status.value} {status.phrase}", headers)
            return [body]

        return secured

    return wrap


def _request_method(environ: dict) -> str:
    """Return the method, noting a form `_method` override if one is posted."""
    method = environ.get("REQUEST_METHOD", "GET")
    if environ.get("CONTENT_TYPE") != _FORM_TYPE or method not in ("POST", "PUT", "PATCH"):
        return method
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        return method
    data = environ["wsgi.input"].read(length) if length > 0 else b""
    environ["wsgi.input"] = io.BytesIO(data)
    try:
        form = parse_qs(data.decode("utf-8"), keep_blank_values=True)
    except (UnicodeDecodeError, ValueError):
        return method
    override = form.get("_method", [""])[0]
    return f"{override} ({method})" if override else method


@dataclass
class _Response:
    status: int = 200
    content_type: str = ""
    body: bytearray = field(default_factory=bytearray)

    def record(self, chunk: bytes) -> None:
        if self.status >= 400:
            self.body.extend(chunk)


def _emit(log: logging.Logger, response: _Response, path: str, method: str) -> None:
    fields = {"status": response.status, "path": path, "method": method}
    if response.content_type.startswith("text/html"):
        error_body = "html response"
    else:
        error_body = response.body.decode("utf-8", "replace")

    status = response.status
    if 0 < status < 400:
        log.info("%s %s", method, path, extra=fields)
    elif 400 <= status < 500:
        log.warning("%s", error_body, extra=fields)
    elif status >= 500:
        log.error("%s", error_body, extra=fields)
    else:
        log.warning("unknown code: %d", status, extra=fields)


def logging_middleware(logger: logging.Logger | None = None) -> Callable[[WSGIApp], WSGIApp]:
    """Log each request's status, path and method once its response is sent."""
    log = logger or logging.getLogger("photoserve.access")

    def wrap(app: WSGIApp) -> WSGIApp:
        def logged(environ: dict, start_response: Callable) -> Iterator[bytes]:
            method = _request_method(environ)
            path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
            if environ.get("QUERY_STRING"):
                path += "?" + environ["QUERY_STRING"]

            response = _Response()

            def capture(status, headers, exc_info=None):
                response.status = int(status.split(None, 1)[0])
                response.content_type = next(
                    (value for key, value in headers if key.lower() == "content-type"), ""
                )
                write = start_response(status, headers, exc_info)

                def tracked_write(data: bytes) -> None:
                    response.record(data)
                    write(data)

                return tracked_write

            result = app(environ, capture)

            def body() -> Iterator[bytes]:
                try:
                    for chunk in result:
                        response.record(chunk)
                        yield chunk
                finally:
                    close = getattr(result, "close", None)
                    if close is not None:
                        close()
                    _emit(log, response, path, method)

            return body()

        return logged

    return wrap