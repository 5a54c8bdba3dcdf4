"""Unit tests for database bootstrap helpers."""

from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.bootstrap import database
from src.bootstrap.database import (
    close_database_engine,
    get_database_url,
    get_replica_session_factory,
    get_session_factory,
    is_database_configured,
    mask_url,
    reset_database_bootstrap,
    to_async_url,
)


@pytest.fixture(autouse=True)
def _reset():
    reset_database_bootstrap()
    yield
    reset_database_bootstrap()


class TestToAsyncUrl:
    """Tests for to_async_url()."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@db/petitions", "postgresql+asyncpg://u:p@db/petitions"),
            ("postgres://u:p@db/petitions", "postgresql+asyncpg://u:p@db/petitions"),
            ("postgresql+asyncpg://db/petitions", "postgresql+asyncpg://db/petitions"),
            ("mysql+aiomysql://db/petitions", "mysql+aiomysql://db/petitions"),
            ("u:p@db/petitions", "postgresql+asyncpg://u:p@db/petitions"),
        ],
    )
    def test_conversion(self, url: str, expected: str) -> None:
        assert to_async_url(url) == expected


class TestEnvironment:
    """Tests for environment lookups."""

    def test_missing_url_raises(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert is_database_configured() is False
            with pytest.raises(ValueError, match="DATABASE_URL"):
                get_database_url()

    def test_url_is_converted(self) -> None:
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql://db/p"}):
            assert is_database_configured() is True
            assert get_database_url() == "postgresql+asyncpg://db/p"


class TestMaskUrl:
    """Tests for mask_url()."""

    def test_hides_password(self) -> None:
        assert (
            mask_url("postgresql+asyncpg://user:hunter2@db:5432/p")
            == "postgresql+asyncpg://user:***@db:5432/p"
        )

    def test_leaves_urls_without_password(self) -> None:
        assert mask_url("postgresql://user@db/p") == "postgresql://user@db/p"
        assert mask_url("postgresql://db/p") == "postgresql://db/p"


class TestSessionFactories:
    """Tests for session factory creation and shutdown."""

    def test_primary_factory_is_created_once(self) -> None:
        engine = MagicMock()
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql://db/p"}), patch.object(
            database, "create_async_engine", return_value=engine
        ) as create_engine:
            first = get_session_factory()
            second = get_session_factory()

        assert first is second
        create_engine.assert_called_once()
        assert create_engine.call_args.args[0] == "postgresql+asyncpg://db/p"

    def test_no_replica_without_url(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_replica_session_factory() is None

    def test_replica_factory(self) -> None:
        env = {"DATABASE_REPLICA_URL": "postgresql://replica/p"}
        with patch.dict(os.environ, env), patch.object(
            database, "create_async_engine", return_value=MagicMock()
        ) as create_engine:
            assert get_replica_session_factory() is not None
        assert create_engine.call_args.args[0] == "postgresql+asyncpg://replica/p"

    @pytest.mark.asyncio
    async def test_close_disposes_engines(self) -> None:
        engine = MagicMock()
        engine.dispose = AsyncMock()
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql://db/p"}), patch.object(
            database, "create_async_engine", return_value=engine
        ):
            first = get_session_factory()
            await close_database_engine()
            second = get_session_factory()

        engine.dispose.assert_awaited_once()
        assert first is not second
