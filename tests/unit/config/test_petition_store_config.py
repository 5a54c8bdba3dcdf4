"""Unit tests for petition store configuration.

Tests for:
- PetitionUrlConfig validation and normalization
- DocumentStoreConfig and UrlShortenerConfig defaults
- Environment variable loading
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from src.config.petition_store_config import (
    DEFAULT_PETITION_URL_CONFIG,
    TEST_PETITION_URL_CONFIG,
    DocumentStoreConfig,
    PetitionUrlConfig,
    UrlShortenerConfig,
)


class TestPetitionUrlConfig:
    """Tests for PetitionUrlConfig."""

    class TestValidation:
        """Tests for base URL validation."""

        def test_default_base_url(self) -> None:
            assert DEFAULT_PETITION_URL_CONFIG.base_url == "https://petitions.localhost"

        def test_trailing_slash_is_trimmed(self) -> None:
            config = PetitionUrlConfig(base_url="https://petitions.example/")
            assert config.base_url == "https://petitions.example"

        def test_rejects_missing_scheme(self) -> None:
            with pytest.raises(ValueError, match="http"):
                PetitionUrlConfig(base_url="petitions.example")

        def test_test_config_uses_recognizable_host(self) -> None:
            assert TEST_PETITION_URL_CONFIG.base_url == "https://petitions.test"

    class TestFromEnvironment:
        """Tests for environment loading."""

        def test_loads_base_url(self) -> None:
            with patch.dict(os.environ, {"PETITION_BASE_URL": "https://p.example/"}):
                config = PetitionUrlConfig.from_environment()
            assert config.base_url == "https://p.example"

        def test_blank_value_uses_default(self) -> None:
            with patch.dict(os.environ, {"PETITION_BASE_URL": "  "}):
                config = PetitionUrlConfig.from_environment()
            assert config.base_url == "https://petitions.localhost"


class TestDocumentStoreConfig:
    """Tests for DocumentStoreConfig."""

    def test_defaults_are_unconfigured(self) -> None:
        config = DocumentStoreConfig()
        assert config.is_configured is False
        assert config.database == "petitions"
        assert config.collection == "petitions"

    def test_rejects_empty_collection(self) -> None:
        with pytest.raises(ValueError, match="collection"):
            DocumentStoreConfig(collection="")

    def test_from_environment(self) -> None:
        env = {
            "MONGO_URL": "mongodb://localhost:27017",
            "MONGO_DATABASE": "legacy",
            "MONGO_PETITION_COLLECTION": "petition_items",
        }
        with patch.dict(os.environ, env):
            config = DocumentStoreConfig.from_environment()
        assert config.is_configured is True
        assert config.url == "mongodb://localhost:27017"
        assert config.database == "legacy"
        assert config.collection == "petition_items"


class TestUrlShortenerConfig:
    """Tests for UrlShortenerConfig."""

    def test_defaults(self) -> None:
        config = UrlShortenerConfig()
        assert config.is_configured is False
        assert config.token is None
        assert config.timeout_seconds == 5.0

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError, match="timeout_seconds"):
            UrlShortenerConfig(timeout_seconds=0)

    def test_from_environment(self) -> None:
        env = {
            "URL_SHORTENER_API_URL": "https://short.example/api/links",
            "URL_SHORTENER_TOKEN": "secret",
            "URL_SHORTENER_TIMEOUT_SECONDS": "2.5",
        }
        with patch.dict(os.environ, env):
            config = UrlShortenerConfig.from_environment()
        assert config.is_configured is True
        assert config.token == "secret"
        assert config.timeout_seconds == 2.5

    def test_invalid_timeout_falls_back_to_default(self) -> None:
        with patch.dict(os.environ, {"URL_SHORTENER_TIMEOUT_SECONDS": "soon"}):
            config = UrlShortenerConfig.from_environment()
        assert config.timeout_seconds == 5.0
