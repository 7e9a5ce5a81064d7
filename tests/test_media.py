from http import HTTPStatus
from urllib.parse import parse_qs, urlsplit

import pytest

from photoserve.media import (
    VALID_MEDIA_RESIZES,
    location_map_key,
    map_url,
    media_original_key,
    media_thumb_key,
    not_modified,
    validate_media_resize,
)
from photoserve.shared import RequestError


@pytest.mark.parametrize("resize", sorted(VALID_MEDIA_RESIZES) + [""])
def test_validate_media_resize_accepts_allowed(resize):
    assert validate_media_resize(resize) == resize


@pytest.mark.parametrize("resize", ["100,fit", "../secret", "300x", "200,FIT"])
def test_validate_media_resize_rejects_others(resize):
    with pytest.raises(RequestError) as info:
        validate_media_resize(resize)
    assert info.value.status == HTTPStatus.BAD_REQUEST
    assert info.value.message == "Invalid resize parameter"


def test_media_original_key():
    assert media_original_key(12, "jpg") == "media/12.jpg"


def test_media_thumb_key_sized_media_uses_fit():
    assert media_thumb_key(5, 100, 200, "100,fit") == "thumbs/media/5-100-fit.jpg"


def test_media_thumb_key_unsized_media_uses_legacy_thumbs():
    assert media_thumb_key(5, 0, 0, "500,fit") == "thumbs/media/5-500x.jpg"
    assert media_thumb_key(5, 100, 0, "500,fit") == "thumbs/media/5-500x.jpg"


def test_media_thumb_key_width_only_option_unchanged():
    assert media_thumb_key(9, 300, 200, "200x") == "thumbs/media/9-200x.jpg"
    assert media_thumb_key(9, 0, 0, "200x") == "thumbs/media/9-200x.jpg"


def test_location_map_key():
    assert location_map_key(3) == "location_maps/3.jpg"


def test_map_url_keeps_base_and_sets_parameters():
    url = map_url("http://maps.example.com/v1/staticmap", "placeholder", 1.1, 1.2)
    parts = urlsplit(url)
    assert parts.scheme == "http"
    assert parts.netloc == "maps.example.com"
    assert parts.path == "/v1/staticmap"

    query = parse_qs(parts.query)
    assert query["style"] == ["osm-bright-smooth"]
    assert query["zoom"] == ["10.3497"]
    assert query["width"] == ["400"]
    assert query["height"] == ["400"]
    assert query["scaleFactor"] == ["2"]
    assert query["apiKey"] == ["placeholder"]
    assert query["center"] == ["lonlat:1.200000,1.100000"]
    assert query["marker"] == [query["center"][0] + ";type:awesome;color:#e01401"]


def test_map_url_parameters_sorted_and_replace_existing_query():
    url = map_url("http://maps.example.com/map?old=1", "placeholder", 0.0, 0.0)
    query = urlsplit(url).query
    keys = [pair.split("=", 1)[0] for pair in query.split("&")]
    assert keys == sorted(keys)
    assert "old" not in keys


def test_map_url_escapes_reserved_characters():
    url = map_url("http://maps.example.com/map", "placeholder", 2.5, -3.5)
    query = urlsplit(url).query
    assert ":" not in query
    assert "#" not in query
    assert "%3A" in query


def test_map_url_rejects_unparsable_url():
    with pytest.raises(RequestError) as info:
        map_url("http://[::1/map", "placeholder", 0.0, 0.0)
    assert info.value.message.startswith("failed to parse mapURL")


def test_not_modified():
    assert not_modified('"abc"', '"abc"') is True
    assert not_modified('"abc"', '"def"') is False
    assert not_modified("", "") is False
    assert not_modified(None, '"abc"') is False