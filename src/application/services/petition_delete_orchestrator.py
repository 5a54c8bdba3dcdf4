"""Delete orchestrator for petitions stored in two backends.

Pipeline:
1. Locate the petition with a realtime load; fall back to the other read
   source when the first one misses. Still missing: PetitionNotFoundError
2. mongo-write and legacy_id known: document-store delete (best effort)
3. mysql-write: re-resolve against the relational store during overlapping
   read phases, then relational delete by entity_id. Without an entity_id
   the row embedding the legacy_id is deleted instead

Steps 2 and 3 touch independent stores and run concurrently.

Failure Policy:
- Document-store delete failures are logged and returned as warnings
- Relational delete failures raise RelationalWriteFailedError
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from src.application.ports.document_store import DocumentStoreProtocol
from src.application.ports.dual_store_metrics import DualStoreMetricsProtocol
from src.application.ports.relational_store import RelationalStoreProtocol
from src.application.services.petition_load_orchestrator import (
    PetitionLoadOrchestrator,
    select_read_source,
)
from src.config.migration_phase_config import MigrationPhaseRegistry, PhaseCapabilities
from src.domain.errors.petition_store import (
    PetitionNotFoundError,
    RelationalWriteFailedError,
)
from src.domain.models.dual_store_result import (
    DeleteResult,
    StoreWarning,
    StoreWarningKind,
)
from src.domain.models.petition_item import PetitionIdentifier, PetitionItem
from src.domain.models.storage_backend import StorageBackend

log = structlog.get_logger()


class PetitionDeleteOrchestrator:
    """Removes a petition from every store that receives writes."""

    def __init__(
        self,
        phase_registry: MigrationPhaseRegistry,
        loader: PetitionLoadOrchestrator,
        document_store: DocumentStoreProtocol,
        relational_store: RelationalStoreProtocol,
        metrics: Optional[DualStoreMetricsProtocol] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            phase_registry: Source of the current storage capabilities.
            loader: Load orchestrator used to locate the petition.
            document_store: Legacy document-store port.
            relational_store: Relational-store port.
            metrics: Optional metrics sink.
        """
        self._phase_registry = phase_registry
        self._loader = loader
        self._document_store = document_store
        self._relational_store = relational_store
        self._metrics = metrics

    async def delete(self, identifier: PetitionIdentifier) -> DeleteResult:
        """Delete a petition by legacy_id (str) or entity_id (int).

        Args:
            identifier: The petition to delete.

        Returns:
            DeleteResult with per-store outcomes and warnings.

        Raises:
            PetitionNotFoundError: If no readable store knows the petition.
            NoReadSourceConfiguredError: If neither store is readable.
            RelationalWriteFailedError: If the relational delete fails.
        """
        capabilities = self._phase_registry.capabilities()
        petition, source = await self._locate(identifier, capabilities)

        document_outcome, relational_outcome = await asyncio.gather(
            self._delete_from_document_store(petition, capabilities),
            self._delete_from_relational_store(petition, source, capabilities),
            return_exceptions=True,
        )
        # The document step converts its own failures into warnings
        if isinstance(document_outcome, BaseException):
            raise document_outcome
        if isinstance(relational_outcome, BaseException):
            raise relational_outcome

        document_deleted, warnings = document_outcome
        relational_deleted, entity_id = relational_outcome

        log.info(
            "petition_deleted",
            identifier=identifier,
            legacy_id=petition.legacy_id,
            entity_id=entity_id,
            document_store_deleted=document_deleted,
            relational_store_deleted=relational_deleted,
            warning_count=len(warnings),
        )
        return DeleteResult(
            legacy_id=petition.legacy_id,
            entity_id=entity_id,
            document_store_deleted=document_deleted,
            relational_store_deleted=relational_deleted,
            warnings=tuple(warnings),
        )

    async def _locate(
        self, identifier: PetitionIdentifier, capabilities: PhaseCapabilities
    ) -> tuple[PetitionItem, StorageBackend]:
        """Find the petition with a realtime read, falling back across stores."""
        primary = select_read_source(capabilities, realtime=True)
        petition = await self._loader.load_object_from(
            primary, [identifier], realtime=True
        )
        if petition is not None:
            return petition, primary

        fallback = (
            StorageBackend.DOCUMENT_STORE
            if primary == StorageBackend.RELATIONAL_STORE
            else StorageBackend.RELATIONAL_STORE
        )
        if capabilities.is_read_enabled(fallback):
            petition = await self._loader.load_object_from(
                fallback, [identifier], realtime=True
            )
            if petition is not None:
                log.debug(
                    "petition_delete_located_on_fallback",
                    identifier=identifier,
                    backend=fallback.value,
                )
                return petition, fallback

        log.info("petition_delete_not_found", identifier=identifier)
        raise PetitionNotFoundError(identifier)

    async def _delete_from_document_store(
        self, petition: PetitionItem, capabilities: PhaseCapabilities
    ) -> tuple[bool, list[StoreWarning]]:
        """Best-effort document-store delete."""
        if not capabilities.mongo_write or petition.legacy_id is None:
            return False, []
        try:
            await self._document_store.delete(petition.legacy_id)
        except Exception as exc:
            self._record_operation(StorageBackend.DOCUMENT_STORE, "failure")
            warning = StoreWarning(
                kind=StoreWarningKind.DOCUMENT_STORE_DELETE_FAILED,
                backend=StorageBackend.DOCUMENT_STORE,
                message=str(exc),
            )
            log.warning(
                "document_store_delete_failed",
                legacy_id=petition.legacy_id,
                error=str(exc),
            )
            if self._metrics is not None:
                self._metrics.record_warning(warning.kind.value)
            return False, [warning]
        self._record_operation(StorageBackend.DOCUMENT_STORE, "success")
        return True, []

    async def _delete_from_relational_store(
        self,
        petition: PetitionItem,
        source: StorageBackend,
        capabilities: PhaseCapabilities,
    ) -> tuple[bool, Optional[int]]:
        """Relational delete, re-resolving the entity id when needed.

        Raises:
            RelationalWriteFailedError: If the relational delete fails.
        """
        if not capabilities.mysql_write:
            return False, petition.entity_id

        entity_id = petition.entity_id
        if (
            capabilities.both_reads_enabled
            and source != StorageBackend.RELATIONAL_STORE
        ):
            resolved = await self._loader.load_object_from(
                StorageBackend.RELATIONAL_STORE,
                petition.identifiers(),
                realtime=True,
            )
            if resolved is not None and resolved.entity_id is not None:
                entity_id = resolved.entity_id

        if entity_id is None and petition.legacy_id is None:
            log.debug("relational_delete_skipped_no_identifier")
            return False, None

        try:
            if entity_id is not None:
                await self._relational_store.delete(entity_id)
            else:
                # Rows linked during a document-read phase are not visible
                # through the located petition
                entity_id = await self._relational_store.delete_by_legacy_id(
                    petition.legacy_id
                )
        except Exception as exc:
            self._record_operation(StorageBackend.RELATIONAL_STORE, "failure")
            log.error(
                "relational_store_delete_failed",
                entity_id=entity_id,
                legacy_id=petition.legacy_id,
                error=str(exc),
            )
            raise RelationalWriteFailedError(
                "delete",
                entity_id if entity_id is not None else petition.legacy_id,
                str(exc),
            ) from exc
        self._record_operation(StorageBackend.RELATIONAL_STORE, "success")
        if entity_id is None:
            log.debug(
                "relational_delete_no_row_for_legacy_id",
                legacy_id=petition.legacy_id,
            )
            return False, None
        return True, entity_id

    def _record_operation(self, backend: StorageBackend, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_backend_operation(backend.value, "delete", outcome)
