from http import HTTPStatus
from io import BytesIO
from wsgiref.util import setup_testing_defaults

import pytest

from photoserve.shared import (
    DeviceIcon,
    LensIcon,
    RequestError,
    icon_content_type,
    parse_id_from_path,
    redirect_handler,
    validate_content_type,
    validate_icon_resize,
)


def call(app, path="/", method="GET"):
    environ = {}
    setup_testing_defaults(environ)
    environ.update(REQUEST_METHOD=method, PATH_INFO=path, **{"wsgi.input": BytesIO()})
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = headers
        return lambda data: None

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


def test_redirect_handler():
    status, headers, _ = call(redirect_handler("/admin"), "/admin/")
    assert status.startswith("303")
    assert [value for key, value in headers if key == "Location"] == ["/admin"]


def test_parse_id_from_path():
    assert parse_id_from_path({"deviceID": "42"}, "deviceID") == 42
    assert parse_id_from_path({"deviceID": "-3"}, "deviceID") == -3


def test_parse_id_missing():
    with pytest.raises(RequestError) as info:
        parse_id_from_path({}, "lensID")
    assert info.value.message == "lensID is required"
    assert info.value.status == HTTPStatus.INTERNAL_SERVER_ERROR


@pytest.mark.parametrize("raw", ["abc", "1.5", "", " 7", "99999999999999999999"])
def test_parse_id_not_integer(raw):
    with pytest.raises(RequestError) as info:
        parse_id_from_path({"lensID": raw}, "lensID")
    assert info.value.message == "lensID was not integer"


def test_validate_content_type():
    validate_content_type({"content-type": ["application/json"]}, "application/json")
    with pytest.raises(RequestError) as info:
        validate_content_type({}, "application/json")
    assert info.value.message == "Content-Type must be set"
    with pytest.raises(RequestError) as info:
        validate_content_type({"Content-Type": "text/plain"}, "application/json")
    assert info.value.message == "Content-Type must be application/json"


def test_device_icon_paths():
    icon = DeviceIcon(7, "x100f", "png")
    assert icon.icon_path() == "device_icons/x100f.png"
    assert icon.thumb_path("200x") == "thumbs/device_icons/7-200x.png"


def test_lens_icon_paths():
    icon = LensIcon(3)
    assert icon.icon_path() == "lens_icons/3.png"
    assert icon.thumb_path("100x") == "thumbs/lens_icons/3-100x.png"


@pytest.mark.parametrize(
    "path, expected",
    [
        ("lens_icons/1.png", "image/png"),
        ("device_icons/a.jpg", "image/jpeg"),
        ("device_icons/a.jpeg", "image/jpeg"),
        ("device_icons/a.gif", "image/jpeg"),
        ("ab", "image/jpeg"),
    ],
)
def test_icon_content_type(path, expected):
    assert icon_content_type(path) == expected


def test_validate_icon_resize():
    assert validate_icon_resize("") == ""
    assert validate_icon_resize("500x") == "500x"
    with pytest.raises(RequestError) as info:
        validate_icon_resize("../etc")
    assert info.value.status == HTTPStatus.BAD_REQUEST
    assert info.value.message == "Invalid resize parameter"