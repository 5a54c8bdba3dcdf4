"""HTTP client for the external URL-shortening service.

Request:
    POST {URL_SHORTENER_API_URL}
    Authorization: Bearer {URL_SHORTENER_TOKEN}   (when configured)
    {"long_url": "https://petitions.example/petition/save-the-park/42"}

Response:
    {"link": "https://sho.rt/abc"}   (``short_url`` is accepted as well)

Any transport error, non-2xx status or malformed body raises; the identity
reconciler turns that into ShortUrlUnavailableError.
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog

from src.application.ports.url_shortener import UrlShortenerProtocol
from src.config.petition_store_config import UrlShortenerConfig

log = structlog.get_logger()

_RESPONSE_KEYS = ("link", "short_url")


class UrlShortenerResponseError(Exception):
    """Raised when the shortener answers without a usable short URL."""


class HttpUrlShortener(UrlShortenerProtocol):
    """UrlShortenerProtocol backed by an HTTP API."""

    def __init__(
        self,
        config: UrlShortenerConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Endpoint, token and timeout.
            transport: Optional transport override (httpx.MockTransport in tests).

        Raises:
            ValueError: If the endpoint is not configured.
        """
        if not config.is_configured:
            raise ValueError("URL_SHORTENER_API_URL is not configured")
        self._config = config
        self._transport = transport

    async def shorten(self, long_url: str) -> str:
        headers = {"Accept": "application/json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"

        async with httpx.AsyncClient(
            transport=self._transport, timeout=self._config.timeout_seconds
        ) as client:
            try:
                response = await client.post(
                    self._config.api_url,
                    json={"long_url": long_url},
                    headers=headers,
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                log.warning(
                    "url_shortener_request_failed",
                    long_url=long_url,
                    error=str(exc),
                )
                raise

        try:
            body = response.json()
        except ValueError as exc:
            raise UrlShortenerResponseError("Shortener returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise UrlShortenerResponseError("Shortener returned a non-object body")

        for key in _RESPONSE_KEYS:
            short_url = body.get(key)
            if short_url:
                return str(short_url)
        raise UrlShortenerResponseError(
            f"Shortener response has no {' or '.join(_RESPONSE_KEYS)}"
        )
