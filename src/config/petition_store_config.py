"""Petition dual-store backend configuration.

This module defines configuration for the derived-URL builder, the document
store connection and the URL-shortening service, with environment variable
overrides for production tuning.

Environment Variables (URLs):
- PETITION_BASE_URL: Base of every nice URL (default: https://petitions.localhost)

Environment Variables (Document Store):
- MONGO_URL: MongoDB connection string (unset = in-memory stub)
- MONGO_DATABASE: Database name (default: petitions)
- MONGO_PETITION_COLLECTION: Collection name (default: petitions)

Environment Variables (URL Shortener):
- URL_SHORTENER_API_URL: Shortening endpoint (unset = in-memory stub)
- URL_SHORTENER_TOKEN: Bearer token (optional)
- URL_SHORTENER_TIMEOUT_SECONDS: Request timeout (default: 5.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_PETITION_BASE_URL = "https://petitions.localhost"
DEFAULT_MONGO_DATABASE = "petitions"
DEFAULT_MONGO_COLLECTION = "petitions"
DEFAULT_SHORTENER_TIMEOUT_SECONDS = 5.0


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_optional_env(key: str) -> Optional[str]:
    """Get a string environment variable, treating blank as unset."""
    value = os.environ.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class PetitionUrlConfig:
    """Configuration for nice URL generation.

    Attributes:
        base_url: Scheme and host every nice URL starts with. Trailing
                  slashes are trimmed.
    """

    base_url: str = DEFAULT_PETITION_BASE_URL

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"base_url must start with http:// or https://, got {self.base_url!r}"
            )
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_environment(cls) -> "PetitionUrlConfig":
        """Create config from environment variables with defaults.

        Returns:
            PetitionUrlConfig with values from environment or defaults.
        """
        return cls(
            base_url=_get_optional_env("PETITION_BASE_URL") or DEFAULT_PETITION_BASE_URL
        )


@dataclass(frozen=True)
class DocumentStoreConfig:
    """Configuration for the MongoDB petition collection.

    Attributes:
        url: MongoDB connection string, or None to use the in-memory stub.
        database: Database holding the petition collection.
        collection: Petition collection name.
    """

    url: Optional[str] = None
    database: str = DEFAULT_MONGO_DATABASE
    collection: str = DEFAULT_MONGO_COLLECTION

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.database:
            raise ValueError("database must not be empty")
        if not self.collection:
            raise ValueError("collection must not be empty")

    @property
    def is_configured(self) -> bool:
        """Return True if a real MongoDB connection is configured."""
        return self.url is not None

    @classmethod
    def from_environment(cls) -> "DocumentStoreConfig":
        """Create config from environment variables with defaults.

        Returns:
            DocumentStoreConfig with values from environment or defaults.
        """
        return cls(
            url=_get_optional_env("MONGO_URL"),
            database=_get_optional_env("MONGO_DATABASE") or DEFAULT_MONGO_DATABASE,
            collection=(
                _get_optional_env("MONGO_PETITION_COLLECTION")
                or DEFAULT_MONGO_COLLECTION
            ),
        )


@dataclass(frozen=True)
class UrlShortenerConfig:
    """Configuration for the URL-shortening service.

    Attributes:
        api_url: Shortening endpoint, or None to use the in-memory stub.
        token: Optional bearer token sent with each request.
        timeout_seconds: Per-request timeout. Default: 5.0 seconds.
    """

    api_url: Optional[str] = None
    token: Optional[str] = None
    timeout_seconds: float = DEFAULT_SHORTENER_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )

    @property
    def is_configured(self) -> bool:
        """Return True if a real shortening endpoint is configured."""
        return self.api_url is not None

    @classmethod
    def from_environment(cls) -> "UrlShortenerConfig":
        """Create config from environment variables with defaults.

        Returns:
            UrlShortenerConfig with values from environment or defaults.
        """
        return cls(
            api_url=_get_optional_env("URL_SHORTENER_API_URL"),
            token=_get_optional_env("URL_SHORTENER_TOKEN"),
            timeout_seconds=_get_float_env(
                "URL_SHORTENER_TIMEOUT_SECONDS", DEFAULT_SHORTENER_TIMEOUT_SECONDS
            ),
        )


# Default production config (loaded from environment at wiring time)
DEFAULT_PETITION_URL_CONFIG = PetitionUrlConfig()

# Testing config with a recognizable host
TEST_PETITION_URL_CONFIG = PetitionUrlConfig(base_url="https://petitions.test")
