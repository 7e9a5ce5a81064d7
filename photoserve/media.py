"""Storage keys and upstream requests for media images and location maps."""

from __future__ import annotations

import math
from http import HTTPStatus
from urllib.parse import urlencode, urlsplit, urlunsplit

from .shared import RequestError

VALID_MEDIA_RESIZES = frozenset(
    {
        "200,fit",
        "500,fit",
        "1000,fit",
        "2000,fit",
        "200x",
        "500x",
        "1000x",
        "2000x",
    }
)


def validate_media_resize(resize: str) -> str:
    """Return the resize option if it is empty or allowed, else raise a 400."""
    if resize and resize not in VALID_MEDIA_RESIZES:
        raise RequestError("Invalid resize parameter", HTTPStatus.BAD_REQUEST)
    return resize


def media_original_key(media_id: int, kind: str) -> str:
    """Bucket key of the uploaded original of a media item."""
    return f"media/{media_id}.{kind}"


def media_thumb_key(media_id: int, width: int, height: int, resize: str) -> str:
    """Bucket key of a resized copy of a media item.

    Items without size information reuse the old 'NNNx' thumbnails in place
    of the ',fit' variants.
    """
    if width == 0 or height == 0:
        resize = resize.replace(",fit", "x", 1)
    else:
        resize = resize.replace(",", "-", 1)
    return f"thumbs/media/{media_id}-{resize}.jpg"


def location_map_key(location_id: int) -> str:
    """Bucket key of the cached map image of a location."""
    return f"location_maps/{location_id}.jpg"


def _coordinate(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.6f}"


def map_url(server_url: str, api_key: str, latitude: float, longitude: float) -> str:
    """Address of a static map image centred on and marking the given point."""
    try:
        parts = urlsplit(server_url)
    except ValueError as exc:
        raise RequestError(f"failed to parse mapURL: {exc}") from exc

    lonlat = f"lonlat:{_coordinate(longitude)},{_coordinate(latitude)}"
    values = {
        "style": "osm-bright-smooth",
        "center": lonlat,
        "zoom": "10.3497",
        "width": "400",
        "height": "400",
        "scaleFactor": "2",
        "marker": f"{lonlat};type:awesome;color:#e01401",
        "apiKey": api_key,
    }
    query = urlencode(sorted(values.items()))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def not_modified(if_none_match: str | None, etag: str) -> bool:
    """Whether the client's If-None-Match already names the current ETag."""
    return bool(if_none_match) and if_none_match == etag