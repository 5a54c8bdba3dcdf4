"""Relational backfill for petitions that only exist in the document store.

Run before switching reads to the relational store: every document that
was created before dual writes started gets a relational row carrying its
legacy_id. The document-derived URL fields are copied as they are; the
document store stays authoritative while the backfill runs.

Per page:
1. fetch_page(after_legacy_id, limit) from the document store
2. one realtime relational query for the page's legacy ids
3. copy each missing petition and reconcile its entity_id

Failures of single petitions are collected in the report; the run goes on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import structlog

from src.application.ports.document_store import DocumentStoreProtocol
from src.application.ports.relational_store import RelationalStoreProtocol
from src.application.services.identity_reconciler import IdentityReconciler
from src.application.services.petition_load_orchestrator import (
    PetitionLoadOrchestrator,
)
from src.domain.errors.petition_store import RelationalWriteFailedError
from src.domain.models.petition_item import LEGACY_ID_FIELD, PetitionItem
from src.domain.models.storage_backend import StorageBackend

log = structlog.get_logger()

DEFAULT_BATCH_SIZE = 500


@dataclass
class BackfillFailure:
    """A petition that could not be copied."""

    legacy_id: Optional[str]
    error: str


@dataclass
class BackfillReport:
    """Summary of a backfill run."""

    started_at: datetime
    completed_at: Optional[datetime] = None
    dry_run: bool = False
    scanned: int = 0
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[BackfillFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Return True if no petition failed."""
        return self.failed == 0

    @property
    def duration_seconds(self) -> float:
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()


class PetitionBackfillService:
    """Copies document-store petitions into the relational store."""

    def __init__(
        self,
        document_store: DocumentStoreProtocol,
        relational_store: RelationalStoreProtocol,
        loader: PetitionLoadOrchestrator,
        reconciler: IdentityReconciler,
    ) -> None:
        """Initialize the service.

        Args:
            document_store: Source of the petitions to copy.
            relational_store: Target of the copy.
            loader: Used to look up petitions already in the relational store.
            reconciler: Reconciles the entity_id of copied petitions.
        """
        self._document_store = document_store
        self._relational_store = relational_store
        self._loader = loader
        self._reconciler = reconciler

    async def backfill(
        self, batch_size: int = DEFAULT_BATCH_SIZE, dry_run: bool = False
    ) -> BackfillReport:
        """Copy every petition missing from the relational store.

        Args:
            batch_size: Documents fetched per page.
            dry_run: If True, count what would be copied without writing.

        Returns:
            BackfillReport with counts and per-petition failures.

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        report = BackfillReport(started_at=datetime.now(timezone.utc), dry_run=dry_run)
        log.info("petition_backfill_started", batch_size=batch_size, dry_run=dry_run)

        after_legacy_id: Optional[str] = None
        while True:
            page = await self._document_store.fetch_page(after_legacy_id, batch_size)
            if not page:
                break
            await self._backfill_page(page, report, dry_run)
            after_legacy_id = str(page[-1][LEGACY_ID_FIELD])
            if len(page) < batch_size:
                break

        report.completed_at = datetime.now(timezone.utc)
        log.info(
            "petition_backfill_completed",
            dry_run=dry_run,
            scanned=report.scanned,
            migrated=report.migrated,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    async def _backfill_page(
        self, page: list[dict], report: BackfillReport, dry_run: bool
    ) -> None:
        petitions = [PetitionItem.from_record(document) for document in page]
        report.scanned += len(petitions)

        legacy_ids = [p.legacy_id for p in petitions if p.legacy_id is not None]
        existing = await self._loader.load_records_from(
            StorageBackend.RELATIONAL_STORE, legacy_ids, realtime=True
        )
        migrated_ids = {record.get(LEGACY_ID_FIELD) for record in existing}

        for petition in petitions:
            if petition.legacy_id in migrated_ids:
                report.skipped += 1
                continue
            if dry_run:
                log.debug("petition_backfill_would_copy", legacy_id=petition.legacy_id)
                report.migrated += 1
                continue
            try:
                await self._copy(petition)
            except Exception as exc:
                report.failed += 1
                report.failures.append(BackfillFailure(petition.legacy_id, str(exc)))
                log.error(
                    "petition_backfill_failed",
                    legacy_id=petition.legacy_id,
                    error=str(exc),
                )
                continue
            report.migrated += 1

    async def _copy(self, petition: PetitionItem) -> None:
        """Write one relational row and reconcile its entity_id."""
        try:
            entity_id = await self._relational_store.save(
                petition.to_relational_record()
            )
        except Exception as exc:
            raise RelationalWriteFailedError(
                "save", petition.legacy_id, str(exc)
            ) from exc
        self._reconciler.assign_entity_identity(petition, entity_id)
        log.debug(
            "petition_backfill_copied",
            legacy_id=petition.legacy_id,
            entity_id=petition.entity_id,
        )
