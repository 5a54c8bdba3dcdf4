"""URL shortener stub implementation.

Returns deterministic short links: the same long URL always maps to the
same short URL, new long URLs get the next sequence number.

WARNING: This stub is for development/testing only.
Production uses HttpUrlShortener.
"""

from __future__ import annotations

from typing import Optional

from src.application.ports.url_shortener import UrlShortenerProtocol

DEFAULT_SHORT_BASE_URL = "https://sho.rt"


class UrlShortenerStub(UrlShortenerProtocol):
    """In-memory implementation of UrlShortenerProtocol.

    Attributes:
        calls: Long URLs passed to shorten(), in order.
        error: If set, raised by shorten().
    """

    def __init__(self, base_url: str = DEFAULT_SHORT_BASE_URL) -> None:
        self._base_url = base_url.rstrip("/")
        self._links: dict[str, str] = {}
        self.calls: list[str] = []
        self.error: Optional[Exception] = None

    async def shorten(self, long_url: str) -> str:
        self.calls.append(long_url)
        if self.error is not None:
            raise self.error
        if long_url not in self._links:
            self._links[long_url] = f"{self._base_url}/{len(self._links) + 1}"
        return self._links[long_url]

    def clear(self) -> None:
        """Forget issued links and recorded calls."""
        self._links.clear()
        self.calls.clear()
