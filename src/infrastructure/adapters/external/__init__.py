"""Adapters for external HTTP services."""

from src.infrastructure.adapters.external.url_shortener_client import (
    HttpUrlShortener,
    UrlShortenerResponseError,
)

__all__ = ["HttpUrlShortener", "UrlShortenerResponseError"]
