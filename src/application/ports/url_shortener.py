"""URL-shortening service port.

The shortener is an external network collaborator that may fail
transiently. Callers treat its failures as non-fatal.
"""

from __future__ import annotations

from typing import Protocol


class UrlShortenerProtocol(Protocol):
    """Protocol for shortening a long URL."""

    async def shorten(self, long_url: str) -> str:
        """Shorten a URL.

        Args:
            long_url: The absolute URL to shorten.

        Returns:
            The shortened URL.

        Raises:
            Exception: Any transport or service error.
        """
        ...
