"""Unit tests for the PetitionStoreService facade."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.services.petition_delete_orchestrator import (
    PetitionDeleteOrchestrator,
)
from src.application.services.petition_load_orchestrator import (
    PetitionLoadOrchestrator,
)
from src.application.services.petition_save_orchestrator import (
    PetitionSaveOrchestrator,
)
from src.application.services.petition_store_service import PetitionStoreService
from src.domain.models.dual_store_result import DeleteResult, SaveResult
from src.domain.models.petition_item import PetitionItem
from src.infrastructure.observability.correlation import (
    correlation_scope,
    get_correlation_id,
)


@pytest.fixture
def seen_ids() -> list[str]:
    """Correlation ids observed inside orchestrator calls."""
    return []


@pytest.fixture
def service(seen_ids: list[str]) -> PetitionStoreService:
    """Create a facade over mocked orchestrators that capture the correlation id."""

    def capture(result):
        async def _call(*args, **kwargs):
            seen_ids.append(get_correlation_id())
            return result

        return AsyncMock(side_effect=_call)

    saver = MagicMock(spec=PetitionSaveOrchestrator)
    saver.save = capture(
        SaveResult(legacy_id="a", entity_id=None, nice_url=None, short_url=None)
    )
    loader = MagicMock(spec=PetitionLoadOrchestrator)
    loader.load = capture({"legacy_id": "a"})
    loader.load_multiple = capture([{"legacy_id": "a"}])
    loader.load_object = capture(PetitionItem(legacy_id="a"))
    loader.load_object_multiple = capture([PetitionItem(legacy_id="a")])
    deleter = MagicMock(spec=PetitionDeleteOrchestrator)
    deleter.delete = capture(DeleteResult(legacy_id="a", entity_id=None))

    return PetitionStoreService(saver, loader, deleter)


class TestCorrelation:
    """Each facade call runs inside a correlation scope."""

    @pytest.mark.asyncio
    async def test_explicit_correlation_id_is_used(
        self, service: PetitionStoreService, seen_ids: list[str]
    ) -> None:
        await service.save(PetitionItem(), correlation_id="req-1")
        await service.delete("a", correlation_id="req-2")
        assert seen_ids == ["req-1", "req-2"]

    @pytest.mark.asyncio
    async def test_generated_id_is_scoped_to_the_call(
        self, service: PetitionStoreService, seen_ids: list[str]
    ) -> None:
        await service.load("a")
        await service.load("a")

        assert all(seen_ids)
        assert seen_ids[0] != seen_ids[1]
        assert get_correlation_id() == ""

    @pytest.mark.asyncio
    async def test_active_scope_is_reused(
        self, service: PetitionStoreService, seen_ids: list[str]
    ) -> None:
        with correlation_scope("outer"):
            await service.load_multiple(["a"])
            await service.load_object("a")
        assert seen_ids == ["outer", "outer"]


class TestDelegation:
    """The facade forwards to the orchestrators unchanged."""

    @pytest.mark.asyncio
    async def test_save_returns_orchestrator_result(
        self, service: PetitionStoreService
    ) -> None:
        result = await service.save(PetitionItem())
        assert result.legacy_id == "a"

    @pytest.mark.asyncio
    async def test_loads_forward_realtime_flag(self, service: PetitionStoreService) -> None:
        items = await service.load_object_multiple(["a"], realtime=False)

        assert items[0].legacy_id == "a"
        service._loader.load_object_multiple.assert_awaited_once_with(
            ["a"], realtime=False
        )

    @pytest.mark.asyncio
    async def test_delete_returns_orchestrator_result(
        self, service: PetitionStoreService
    ) -> None:
        result = await service.delete(5)
        assert isinstance(result, DeleteResult)
        service._deleter.delete.assert_awaited_once_with(5)
