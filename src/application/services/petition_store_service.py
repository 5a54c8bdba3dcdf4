"""Caller-facing petition store service.

Single entry point used by the rest of the application for petition
persistence during the document-store to relational-store migration.
Callers never see which backend served them; each call runs inside a
correlation scope so its log lines can be grouped.

Usage:
    service = create_petition_store_service()

    result = await service.save(petition)
    if result.has_warning(StoreWarningKind.SHORT_URL_UNAVAILABLE):
        ...

    petition = await service.load_object("65f0c0ffee0000000000abcd")
    await service.delete(42)
"""

from __future__ import annotations

from typing import Any, Optional

from src.application.services.petition_delete_orchestrator import (
    PetitionDeleteOrchestrator,
)
from src.application.services.petition_load_orchestrator import (
    IdentifierInput,
    PetitionLoadOrchestrator,
)
from src.application.services.petition_save_orchestrator import (
    PetitionSaveOrchestrator,
)
from src.domain.models.dual_store_result import DeleteResult, SaveResult
from src.domain.models.petition_item import PetitionIdentifier, PetitionItem
from src.infrastructure.observability.correlation import correlation_scope


class PetitionStoreService:
    """Facade over the save, load and delete orchestrators."""

    def __init__(
        self,
        save_orchestrator: PetitionSaveOrchestrator,
        load_orchestrator: PetitionLoadOrchestrator,
        delete_orchestrator: PetitionDeleteOrchestrator,
    ) -> None:
        self._saver = save_orchestrator
        self._loader = load_orchestrator
        self._deleter = delete_orchestrator

    async def save(
        self, petition: PetitionItem, correlation_id: Optional[str] = None
    ) -> SaveResult:
        """Save a petition to every active write target."""
        with correlation_scope(correlation_id):
            return await self._saver.save(petition)

    async def delete(
        self, identifier: PetitionIdentifier, correlation_id: Optional[str] = None
    ) -> DeleteResult:
        """Delete a petition by legacy_id (str) or entity_id (int)."""
        with correlation_scope(correlation_id):
            return await self._deleter.delete(identifier)

    async def load(
        self, identifier: PetitionIdentifier, realtime: bool = True
    ) -> Optional[dict[str, Any]]:
        """Load one raw record, or None."""
        with correlation_scope():
            return await self._loader.load(identifier, realtime=realtime)

    async def load_multiple(
        self, identifiers: IdentifierInput, realtime: bool = True
    ) -> list[dict[str, Any]]:
        """Load raw records for a set of identifiers."""
        with correlation_scope():
            return await self._loader.load_multiple(identifiers, realtime=realtime)

    async def load_object(
        self, identifier: PetitionIdentifier, realtime: bool = True
    ) -> Optional[PetitionItem]:
        """Load one hydrated petition, or None."""
        with correlation_scope():
            return await self._loader.load_object(identifier, realtime=realtime)

    async def load_object_multiple(
        self, identifiers: IdentifierInput, realtime: bool = True
    ) -> list[PetitionItem]:
        """Load hydrated petitions for a set of identifiers."""
        with correlation_scope():
            return await self._loader.load_object_multiple(
                identifiers, realtime=realtime
            )
