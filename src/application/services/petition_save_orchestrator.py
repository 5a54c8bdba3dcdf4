"""Dual-write save orchestrator for petitions under migration.

This module sequences a petition save across the active backends and folds
identifier and URL updates back into the in-memory PetitionItem.

Pipeline (hard barrier between the steps):
1. mongo-write: save document -> reconcile legacy_id -> nice URL from
   legacy_id -> short URL (non-draft) -> save document again
2. mysql-write: save relational record (embeds legacy_id) -> reconcile
   entity_id -> nice URL from entity_id when the relational store is
   authoritative -> short URL (non-draft) -> re-save if derived fields changed
3. neither: no-op success

Failure Policy:
- Step 1 failures raise DocumentStoreWriteFailedError; step 2 never starts
- Step 2 failures after a successful step 1 become warnings (no rollback)
- Step 2 failures when the relational store is the only target are raised
- IdentityConflictError always propagates
- Short URL failures are logged and recorded as warnings

Developer Golden Rules:
1. DOCUMENT FIRST - The relational record may embed the legacy identifier
2. TWO WRITES - URL fields are only known after the first write
3. NO ROLLBACK - There is no compensating transaction across stores
"""

from __future__ import annotations

from typing import Optional

import structlog

from src.application.ports.document_store import DocumentStoreProtocol
from src.application.ports.dual_store_metrics import DualStoreMetricsProtocol
from src.application.ports.relational_store import RelationalStoreProtocol
from src.application.services.identity_reconciler import IdentityReconciler
from src.config.migration_phase_config import MigrationPhaseRegistry, PhaseCapabilities
from src.domain.errors.petition_store import (
    DocumentStoreWriteFailedError,
    RelationalWriteFailedError,
    ShortUrlUnavailableError,
)
from src.domain.models.dual_store_result import (
    SaveResult,
    StoreWarning,
    StoreWarningKind,
)
from src.domain.models.petition_item import PetitionItem
from src.domain.models.storage_backend import StorageBackend

log = structlog.get_logger()

URL_SHORTENER_METRIC_NAME = "url_shortener"


class PetitionSaveOrchestrator:
    """Saves a petition to the document store and/or the relational store.

    The phase registry is consulted once per call; the snapshot is used for
    the whole save so that both steps agree on the active targets.
    """

    def __init__(
        self,
        phase_registry: MigrationPhaseRegistry,
        document_store: DocumentStoreProtocol,
        relational_store: RelationalStoreProtocol,
        reconciler: IdentityReconciler,
        metrics: Optional[DualStoreMetricsProtocol] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            phase_registry: Source of the current storage capabilities.
            document_store: Legacy document-store port.
            relational_store: Relational-store port.
            reconciler: Identity and URL reconciler.
            metrics: Optional metrics sink.
        """
        self._phase_registry = phase_registry
        self._document_store = document_store
        self._relational_store = relational_store
        self._reconciler = reconciler
        self._metrics = metrics

    async def save(self, petition: PetitionItem) -> SaveResult:
        """Save a petition across the active write targets.

        The petition is mutated in place (identifiers and URL fields only).

        Args:
            petition: The petition to persist.

        Returns:
            SaveResult carrying both identifiers and any non-fatal warnings.

        Raises:
            DocumentStoreWriteFailedError: If the document-store step fails.
            RelationalWriteFailedError: If the relational store is the only
                write target and its save fails.
            IdentityConflictError: If a backend returns a conflicting id.
        """
        capabilities = self._phase_registry.capabilities()
        warnings: list[StoreWarning] = []
        logger = log.bind(
            legacy_id=petition.legacy_id,
            entity_id=petition.entity_id,
            status=petition.status.value,
        )

        # A draft never carries a short URL
        if petition.is_draft:
            petition.short_url = None

        document_written = False
        relational_written = False

        if capabilities.mongo_write:
            await self._save_to_document_store(petition, capabilities, warnings)
            document_written = True

        # Barrier: the relational step only starts once the document step returned
        if capabilities.mysql_write:
            relational_written = await self._save_to_relational_store(
                petition, capabilities, warnings
            )

        if not (capabilities.mongo_write or capabilities.mysql_write):
            logger.info("petition_save_skipped_no_write_target")
        else:
            logger.info(
                "petition_saved",
                legacy_id=petition.legacy_id,
                entity_id=petition.entity_id,
                document_store_written=document_written,
                relational_store_written=relational_written,
                warning_count=len(warnings),
            )

        return SaveResult(
            legacy_id=petition.legacy_id,
            entity_id=petition.entity_id,
            nice_url=petition.nice_url,
            short_url=petition.short_url,
            document_store_written=document_written,
            relational_store_written=relational_written,
            warnings=tuple(warnings),
        )

    async def _save_to_document_store(
        self,
        petition: PetitionItem,
        capabilities: PhaseCapabilities,
        warnings: list[StoreWarning],
    ) -> None:
        """Run step 1: the two-write document-store protocol."""
        previous_nice_url = petition.nice_url

        legacy_id = await self._write_document(petition)
        self._reconciler.assign_legacy_identity(petition, legacy_id)

        if capabilities.relational_authoritative and petition.entity_id is not None:
            # Keep mirroring the canonical entity URL once the relational store owns it
            nice_url = self._reconciler.compute_nice_url_from_entity(petition)
        else:
            nice_url = self._reconciler.compute_nice_url_from_legacy(petition)
        petition.apply_nice_url(nice_url, self._reconciler.path_of(nice_url))
        await self._refresh_short_url(petition, previous_nice_url, warnings)

        # Second write persists the URL fields derived from the first
        legacy_id = await self._write_document(petition)
        self._reconciler.assign_legacy_identity(petition, legacy_id)

    async def _write_document(self, petition: PetitionItem) -> str:
        """Save the flat document, wrapping driver errors."""
        try:
            legacy_id = await self._document_store.save(petition.to_document())
        except Exception as exc:
            self._record_operation(StorageBackend.DOCUMENT_STORE, "save", "failure")
            log.error(
                "document_store_save_failed",
                legacy_id=petition.legacy_id,
                error=str(exc),
            )
            raise DocumentStoreWriteFailedError(
                "save", petition.legacy_id, str(exc)
            ) from exc
        self._record_operation(StorageBackend.DOCUMENT_STORE, "save", "success")
        return legacy_id

    async def _save_to_relational_store(
        self,
        petition: PetitionItem,
        capabilities: PhaseCapabilities,
        warnings: list[StoreWarning],
    ) -> bool:
        """Run step 2: relational save plus optional URL re-save.

        Returns:
            True if the relational record was written at least once.
        """
        previous_nice_url = petition.nice_url

        try:
            entity_id = await self._relational_store.save(
                petition.to_relational_record()
            )
        except Exception as exc:
            self._handle_relational_failure(petition, capabilities, exc, warnings)
            return False
        self._record_operation(StorageBackend.RELATIONAL_STORE, "save", "success")
        self._reconciler.assign_entity_identity(petition, entity_id)

        persisted_fields = petition.derived_fields()
        if capabilities.relational_authoritative:
            nice_url = self._reconciler.compute_nice_url_from_entity(petition)
            petition.apply_nice_url(nice_url, self._reconciler.path_of(nice_url))
        await self._refresh_short_url(petition, previous_nice_url, warnings)

        if petition.derived_fields() == persisted_fields:
            return True

        try:
            entity_id = await self._relational_store.save(
                petition.to_relational_record()
            )
        except Exception as exc:
            self._handle_relational_failure(petition, capabilities, exc, warnings)
            return True
        self._record_operation(StorageBackend.RELATIONAL_STORE, "save", "success")
        self._reconciler.assign_entity_identity(petition, entity_id)
        return True

    def _handle_relational_failure(
        self,
        petition: PetitionItem,
        capabilities: PhaseCapabilities,
        exc: Exception,
        warnings: list[StoreWarning],
    ) -> None:
        """Apply the relational failure policy.

        Raises:
            RelationalWriteFailedError: If no document write backs this save.
        """
        self._record_operation(StorageBackend.RELATIONAL_STORE, "save", "failure")
        if not capabilities.mongo_write:
            log.error(
                "relational_store_save_failed",
                entity_id=petition.entity_id,
                legacy_id=petition.legacy_id,
                error=str(exc),
            )
            raise RelationalWriteFailedError(
                "save", petition.entity_id, str(exc)
            ) from exc
        self._warn(
            warnings,
            StoreWarning(
                kind=StoreWarningKind.RELATIONAL_WRITE_FAILED,
                backend=StorageBackend.RELATIONAL_STORE,
                message=str(exc),
            ),
            legacy_id=petition.legacy_id,
            entity_id=petition.entity_id,
        )

    async def _refresh_short_url(
        self,
        petition: PetitionItem,
        previous_nice_url: Optional[str],
        warnings: list[StoreWarning],
    ) -> None:
        """Compute the short URL when it is missing or the nice URL moved."""
        if petition.is_draft:
            petition.short_url = None
            return
        if petition.short_url and petition.nice_url == previous_nice_url:
            return
        try:
            petition.short_url = await self._reconciler.compute_short_url(petition)
        except ShortUrlUnavailableError as exc:
            # A short URL for a previous nice URL would point at the wrong page
            petition.short_url = None
            self._record_operation_name(URL_SHORTENER_METRIC_NAME, "shorten", "failure")
            self._warn(
                warnings,
                StoreWarning(
                    kind=StoreWarningKind.SHORT_URL_UNAVAILABLE,
                    backend=None,
                    message=str(exc),
                ),
                legacy_id=petition.legacy_id,
                entity_id=petition.entity_id,
            )
            return
        self._record_operation_name(URL_SHORTENER_METRIC_NAME, "shorten", "success")

    def _warn(
        self,
        warnings: list[StoreWarning],
        warning: StoreWarning,
        **context: object,
    ) -> None:
        """Record, log and count a non-fatal warning."""
        warnings.append(warning)
        log.warning(
            "petition_save_warning",
            kind=warning.kind.value,
            backend=warning.backend.value if warning.backend else None,
            detail=warning.message,
            **context,
        )
        if self._metrics is not None:
            self._metrics.record_warning(warning.kind.value)

    def _record_operation(
        self, backend: StorageBackend, operation: str, outcome: str
    ) -> None:
        self._record_operation_name(backend.value, operation, outcome)

    def _record_operation_name(self, backend: str, operation: str, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_backend_operation(backend, operation, outcome)
