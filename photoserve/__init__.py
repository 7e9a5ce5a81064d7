"""Helpers for a personal photo site: WSGI middleware, redirects, template functions, periods, trips and media keys."""

__version__ = "0.1.0"

__all__ = ["media", "middleware", "periods", "posts", "shared", "templating", "trips"]