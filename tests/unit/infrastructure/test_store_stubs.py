"""Unit tests for the in-memory store and shortener stubs."""

from __future__ import annotations

import pytest

from src.infrastructure.stubs.document_store_stub import DocumentStoreStub
from src.infrastructure.stubs.relational_store_stub import RelationalStoreStub
from src.infrastructure.stubs.url_shortener_stub import UrlShortenerStub


class TestDocumentStoreStub:
    """Tests for DocumentStoreStub."""

    @pytest.mark.asyncio
    async def test_insert_then_upsert(self) -> None:
        store = DocumentStoreStub()
        legacy_id = await store.save({"legacy_id": None, "title": "T"})
        again = await store.save({"legacy_id": legacy_id, "title": "U"})

        assert again == legacy_id
        assert store.count() == 1
        assert store.get(legacy_id)["title"] == "U"

    @pytest.mark.asyncio
    async def test_minted_ids_sort_in_insertion_order(self) -> None:
        store = DocumentStoreStub()
        ids = [await store.save({"legacy_id": None}) for _ in range(12)]
        assert ids == sorted(ids)
        assert all(len(i) == 24 for i in ids)

    @pytest.mark.asyncio
    async def test_save_calls_are_snapshots(self) -> None:
        store = DocumentStoreStub()
        document = {"legacy_id": None, "title": "T"}
        await store.save(document)
        document["title"] = "changed"
        assert store.save_calls[0]["title"] == "T"

    @pytest.mark.asyncio
    async def test_frozen_replica_lags(self) -> None:
        store = DocumentStoreStub()
        store.seed({"legacy_id": "a"})
        store.freeze_replica()
        store.seed({"legacy_id": "b"})

        stale = await store.query(realtime=False).fetch_records(["a", "b"])
        fresh = await store.query(realtime=True).fetch_records(["a", "b"])

        assert [r["legacy_id"] for r in stale] == ["a"]
        assert len(fresh) == 2
        store.sync_replica()
        assert len(await store.query(realtime=False).fetch_records(["b"])) == 1

    @pytest.mark.asyncio
    async def test_fetch_page(self) -> None:
        store = DocumentStoreStub()
        for legacy_id in ("c", "a", "b"):
            store.seed({"legacy_id": legacy_id})

        assert [d["legacy_id"] for d in await store.fetch_page(None, 2)] == ["a", "b"]
        assert [d["legacy_id"] for d in await store.fetch_page("b", 2)] == ["c"]

    @pytest.mark.asyncio
    async def test_delete_ignores_unknown_ids(self) -> None:
        store = DocumentStoreStub()
        await store.delete("missing")
        assert store.delete_calls == ["missing"]

    @pytest.mark.asyncio
    async def test_configured_errors(self) -> None:
        store = DocumentStoreStub()
        store.query_error = TimeoutError("slow")
        with pytest.raises(TimeoutError):
            await store.query(realtime=True).fetch_items(["a"])

    def test_empty_stub_is_truthy(self) -> None:
        assert DocumentStoreStub()


class TestRelationalStoreStub:
    """Tests for RelationalStoreStub."""

    @pytest.mark.asyncio
    async def test_auto_increment_and_update(self) -> None:
        store = RelationalStoreStub()
        first = await store.save({"entity_id": None, "payload": {}})
        second = await store.save({"entity_id": None, "payload": {}})
        updated = await store.save({"entity_id": first, "status": "archived", "payload": {}})

        assert (first, second, updated) == (1, 2, 1)
        assert store.get(1)["status"] == "archived"

    @pytest.mark.asyncio
    async def test_explicit_id_advances_sequence(self) -> None:
        store = RelationalStoreStub()
        await store.save({"entity_id": 10, "payload": {}})
        assert await store.save({"entity_id": None, "payload": {}}) == 11

    @pytest.mark.asyncio
    async def test_legacy_id_is_unique(self) -> None:
        store = RelationalStoreStub()
        await store.save({"legacy_id": "a", "payload": {}})
        with pytest.raises(ValueError, match="duplicate legacy_id"):
            await store.save({"entity_id": 5, "legacy_id": "a", "payload": {}})

    @pytest.mark.asyncio
    async def test_save_without_entity_id_updates_row_by_legacy_id(self) -> None:
        store = RelationalStoreStub()
        first = await store.save({"legacy_id": "a", "payload": {"title": "T"}})
        again = await store.save({"legacy_id": "a", "payload": {"title": "U"}})

        assert again == first
        assert store.count() == 1
        assert store.get(first)["payload"] == {"title": "U"}

    @pytest.mark.asyncio
    async def test_delete_by_legacy_id(self) -> None:
        store = RelationalStoreStub()
        entity_id = await store.save({"legacy_id": "a", "payload": {}})

        assert await store.delete_by_legacy_id("missing") is None
        assert await store.delete_by_legacy_id("a") == entity_id
        assert store.count() == 0
        assert store.delete_by_legacy_id_calls == ["missing", "a"]

    @pytest.mark.asyncio
    async def test_query_returns_flat_records(self) -> None:
        store = RelationalStoreStub()
        await store.save({"legacy_id": "a", "status": "draft", "payload": {"title": "T"}})

        records = await store.query(realtime=False).fetch_records(["a"])

        assert records[0]["title"] == "T"
        assert records[0]["entity_id"] == 1
        assert store.query_calls[0].realtime is False

    @pytest.mark.asyncio
    async def test_fail_on_one_save_call(self) -> None:
        store = RelationalStoreStub()
        store.save_error = ConnectionError("db down")
        store.fail_on_save_call = 2

        await store.save({"payload": {}})
        with pytest.raises(ConnectionError):
            await store.save({"payload": {}})
        await store.save({"payload": {}})
        assert store.count() == 2


class TestUrlShortenerStub:
    """Tests for UrlShortenerStub."""

    @pytest.mark.asyncio
    async def test_deterministic_links(self) -> None:
        shortener = UrlShortenerStub()
        first = await shortener.shorten("https://p.test/1")
        second = await shortener.shorten("https://p.test/2")
        repeat = await shortener.shorten("https://p.test/1")

        assert (first, second, repeat) == (
            "https://sho.rt/1",
            "https://sho.rt/2",
            "https://sho.rt/1",
        )
        assert len(shortener.calls) == 3

    @pytest.mark.asyncio
    async def test_clear(self) -> None:
        shortener = UrlShortenerStub("https://s.test/")
        await shortener.shorten("https://p.test/1")
        shortener.clear()
        assert shortener.calls == []
        assert await shortener.shorten("https://p.test/9") == "https://s.test/1"
