# photoserve

Building blocks for serving a personal photo site: WSGI middleware and
small WSGI apps, request helpers, functions for page templates, date-period
and trip headings, and the object-storage keys used for media, icons and
location maps.

The package has no runtime dependencies.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is in it

### `photoserve.shared`

Helpers used by every handler. Failures are raised as `RequestError`, which
carries a `message` and an HTTP `status` (500 unless stated otherwise).

- `parse_id_from_path(params, param_name)` reads a signed 64-bit integer
  from a mapping of matched route parameters. A missing parameter raises
  `RequestError("<name> is required")`, a non-integer one
  `RequestError("<name> was not integer")`.
- `validate_content_type(headers, expected)` raises a 400 `RequestError`
  unless the `Content-Type` header (looked up case-insensitively; the first
  value if a list is given) is exactly `expected`.
- `redirect_handler(path)` builds a WSGI app that answers every request with
  `303 See Other` to `path`.
- `DeviceIcon(id, slug, icon_kind)` and `LensIcon(id)` give the bucket keys
  of an icon and its resized copies through `icon_path()` and
  `thumb_path(resize)`.
- `icon_content_type(icon_path)` returns `image/png` for paths ending in
  `png` and `image/jpeg` otherwise.
- `validate_icon_resize(resize)` returns an empty or permitted size
  (`100x`, `200x`, `500x`, `1000x`) and raises a 400 `RequestError` for
  anything else.

```python
from photoserve.shared import DeviceIcon, parse_id_from_path

parse_id_from_path({"deviceID": "12"}, "deviceID")   # 12
DeviceIcon(12, "x100f", "png").thumb_path("200x")
# "thumbs/device_icons/12-200x.png"
```

### `photoserve.middleware`

Both functions return a decorator that wraps a WSGI app.

- `https_middleware(hostname, environment)`: when `environment` is
  `"production"`, the host does not start with `localhost` and
  `X-Forwarded-Proto` is not `https`, answers `308 Permanent Redirect` to
  the same path and query on `https://<hostname>:443`, with
  `Strict-Transport-Security: max-age=3600`. Otherwise the request passes
  through.
- `logging_middleware(logger=None)` logs each request once its body has been
  sent, with `status`, `path` (including the query string) and `method` as
  extra fields. A form-encoded request carrying `_method` is logged as
  e.g. `DELETE (POST)`. Statuses below 400 are logged at info, 4xx at
  warning and 5xx at error with the response body (or `html response` for
  HTML responses). The default logger is `photoserve.access`.

```python
from photoserve.middleware import https_middleware, logging_middleware

app = logging_middleware()(https_middleware("photos.example.com", "production")(app))
```

### `photoserve.templating`

Functions for use in page templates, and the stylesheet bundle.

- `to_string(value)` renders a value as text: `None` as `<nil>`, booleans
  as `true`/`false`, floats in shortest form, mappings as `map[k:v ...]`
  with sorted keys and lists as `[a b ...]`.
- `truncate(text, length, ellipsis)` cuts text to `length` characters,
  adding `...` when `ellipsis` is true.
- `display_offset(width, height, offset)` gives a CSS position such as
  `"30% 0%"` for cropping landscape or portrait media; square media get
  `"50% 50%"`.
- `days_diff(t1, t2)` gives the number of calendar days between two
  datetimes as e.g. `"3 days"`.
- `build_stylesheet(normalize, tachyons, site)` joins three stylesheets
  (text or bytes), each followed by a newline, into a `StyleSheet` with
  `content` and a SHA-1 `etag`; `styles_handler(stylesheet)` is a WSGI app
  serving it as `text/css` with `Cache-Control: public, max-age=60`.

```python
from photoserve.templating import truncate

truncate("photograph", 5, True)   # "photo..."
```

### `photoserve.periods`

Date ranges for the "posts from … to …" pages.

- `parse_period(from_string, to_string=None)` turns `YYYY-MM-DD` strings
  into a `Period` with `start`, `end`, `title`, `time_format` and
  `show_dates`. Without an end the period is one day; with one it runs to
  the last second of that day. Bad or missing dates raise a 400
  `RequestError`.
- `period_title(start, end)` builds the heading, e.g.
  `"Posts from November 1-29, 2021"`.
- `group_by_date(items, key, time_format)` groups items by their formatted
  date (`"January 2"` or `"January 2, 2006"` layouts), keeping first-seen
  order.
- `legacy_period_redirect(month, day)` maps two-digit month and day to an
  on-this-day path; `parse_on_this_day(month, day)` reads a month name and
  day number into `(month, day)` or `None`; `period_index_redirect(from,
  to)` gives the path the period form leads to, or `None` without a start.

```python
from photoserve.periods import legacy_period_redirect, period_index_redirect

legacy_period_redirect("09", "01")
# "/posts/on-this-day/September-1"
period_index_redirect("2021-10-01", "2021-11-01")
# "/posts/period/2021-10-01-to-2021-11-01"
```

### `photoserve.trips`

- `trip_range_end(end_date)` gives the last second of a trip's final day.
- `trip_date_title(start_date, end_date)` builds the trip's date heading.
- `trip_show_dates(start_date, end_date)` says whether the trip spans more
  than a day, so that posts are shown under per-day headings.

### `photoserve.posts`

- `clean_search_query(query)` keeps only ASCII word characters and
  whitespace, collapsing whitespace runs to single spaces.
- `page_from_param(param)` returns the requested page: 1 for an empty or
  unparsable value, `None` for numbers below 2 (redirect to the bare
  index). `last_page(count, page_size=PAGE_SIZE)` gives the last page
  number; `PAGE_SIZE` is 42.
- `legacy_post_redirect(date)` sends an old post link to
  `/posts/period/<date>`.
- `latest_payload(location_name, post_id, publish_date)` builds the
  newline-terminated JSON body with `location`, `url` (under `SITE_URL`)
  and an RFC 3339 `created_at`.

```python
from photoserve.posts import legacy_post_redirect

legacy_post_redirect("2018-07-08")   # "/posts/period/2018-07-08"
```

### `photoserve.media`

- `validate_media_resize(resize)` accepts an empty value or one of
  `200,fit`, `500,fit`, `1000,fit`, `2000,fit`, `200x`, `500x`, `1000x`,
  `2000x`, and raises a 400 `RequestError` otherwise.
- `media_original_key(media_id, kind)` and
  `media_thumb_key(media_id, width, height, resize)` give bucket keys for
  originals and thumbnails; media without size information use the `NNNx`
  thumbnails in place of `,fit` ones.
- `location_map_key(location_id)` gives the key of a cached map image, and
  `map_url(server_url, api_key, latitude, longitude)` the address of a
  static map image marking the point.
- `not_modified(if_none_match, etag)` says whether a `304 Not Modified`
  answer applies.

```python
from photoserve.media import media_thumb_key

media_thumb_key(7, 100, 200, "500,fit")   # "thumbs/media/7-500-fit.jpg"
```

## What it does not do

photoserve is a set of helpers, not a running site. It has no HTTP server
or route table, no database access, no object-storage client, no image
resizing, no upstream map fetching, no page templates or HTML rendering and
no RSS feed. Those are left to the application that uses these pieces.