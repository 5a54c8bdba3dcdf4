"""Dual-read load orchestrator for petitions under migration.

This module selects a query source for each read according to the current
migration phase and the caller's freshness requirement, then resolves the
whole identifier set with a single backend call.

Source Selection:
- realtime=True: relational store if mysql-read, else document store if
  mongo-read (the relational store is assumed strongly consistent)
- realtime=False: the only readable store; with both readable, the store
  preferred for writes (reduces cross-store skew); remaining ties go to the
  relational store, the migration target
- nothing readable: NoReadSourceConfiguredError

Batch Semantics:
- One backend call per batch
- Missing identifiers are absent from the result, never an error
- Result order is not guaranteed to match input order
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional, Union

import structlog

from src.application.ports.dual_store_metrics import DualStoreMetricsProtocol
from src.application.ports.petition_query import PetitionQueryFactoryProtocol
from src.config.migration_phase_config import MigrationPhaseRegistry, PhaseCapabilities
from src.domain.errors.petition_store import NoReadSourceConfiguredError
from src.domain.models.petition_item import (
    PetitionIdentifier,
    PetitionItem,
    partition_identifiers,
)
from src.domain.models.storage_backend import StorageBackend

log = structlog.get_logger()

IdentifierInput = Union[PetitionIdentifier, Iterable[PetitionIdentifier]]


def normalize_identifiers(identifiers: IdentifierInput) -> list[PetitionIdentifier]:
    """Turn a single identifier or a collection into a de-duplicated list.

    Args:
        identifiers: One identifier, or an iterable of identifiers.

    Returns:
        Identifiers in first-seen order, legacy ids before entity ids.

    Raises:
        TypeError: If an identifier is neither str nor int.
    """
    if isinstance(identifiers, (str, int)):
        identifiers = [identifiers]
    legacy_ids, entity_ids = partition_identifiers(identifiers)
    return [*legacy_ids, *entity_ids]


def select_read_source(
    capabilities: PhaseCapabilities, realtime: bool
) -> StorageBackend:
    """Pick the backend that serves a read.

    Args:
        capabilities: Current phase capabilities.
        realtime: Whether the read must reflect the latest commit.

    Returns:
        The selected StorageBackend.

    Raises:
        NoReadSourceConfiguredError: If neither store is readable.
    """
    if not capabilities.any_read_enabled:
        raise NoReadSourceConfiguredError()

    if realtime:
        if capabilities.mysql_read:
            return StorageBackend.RELATIONAL_STORE
        return StorageBackend.DOCUMENT_STORE

    if not capabilities.both_reads_enabled:
        if capabilities.mysql_read:
            return StorageBackend.RELATIONAL_STORE
        return StorageBackend.DOCUMENT_STORE

    preferred = capabilities.preferred_write_backend
    if preferred is not None and capabilities.is_read_enabled(preferred):
        return preferred
    return StorageBackend.RELATIONAL_STORE


class PetitionLoadOrchestrator:
    """Loads petitions from whichever store the phase designates.

    Provides raw-record and hydrated variants, each in batch and
    single-item form. Single-item loads are batch loads of one identifier
    returning the first result or None.
    """

    def __init__(
        self,
        phase_registry: MigrationPhaseRegistry,
        query_factory: PetitionQueryFactoryProtocol,
        metrics: Optional[DualStoreMetricsProtocol] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            phase_registry: Source of the current storage capabilities.
            query_factory: Builds queries against a selected backend.
            metrics: Optional metrics sink.
        """
        self._phase_registry = phase_registry
        self._query_factory = query_factory
        self._metrics = metrics

    def select_source(self, realtime: bool = True) -> StorageBackend:
        """Pick the read source for the current phase.

        Raises:
            NoReadSourceConfiguredError: If neither store is readable.
        """
        source = select_read_source(self._phase_registry.capabilities(), realtime)
        if self._metrics is not None:
            self._metrics.record_read_source(source.value, realtime)
        return source

    async def load_multiple(
        self, identifiers: IdentifierInput, realtime: bool = True
    ) -> list[dict[str, Any]]:
        """Load raw flat records for a set of identifiers.

        Args:
            identifiers: legacy ids (str) and/or entity ids (int).
            realtime: Whether the read must reflect the latest commit.

        Returns:
            Records for the identifiers that exist, in no particular order.

        Raises:
            NoReadSourceConfiguredError: If neither store is readable.
        """
        source = self.select_source(realtime)
        return await self.load_records_from(source, identifiers, realtime=realtime)

    async def load_object_multiple(
        self, identifiers: IdentifierInput, realtime: bool = True
    ) -> list[PetitionItem]:
        """Load hydrated petitions for a set of identifiers.

        Args:
            identifiers: legacy ids (str) and/or entity ids (int).
            realtime: Whether the read must reflect the latest commit.

        Returns:
            Petitions for the identifiers that exist, in no particular order.

        Raises:
            NoReadSourceConfiguredError: If neither store is readable.
        """
        source = self.select_source(realtime)
        return await self.load_objects_from(source, identifiers, realtime=realtime)

    async def load(
        self, identifier: PetitionIdentifier, realtime: bool = True
    ) -> Optional[dict[str, Any]]:
        """Load one raw record, or None if not found."""
        records = await self.load_multiple([identifier], realtime=realtime)
        return records[0] if records else None

    async def load_object(
        self, identifier: PetitionIdentifier, realtime: bool = True
    ) -> Optional[PetitionItem]:
        """Load one hydrated petition, or None if not found."""
        items = await self.load_object_multiple([identifier], realtime=realtime)
        return items[0] if items else None

    async def load_records_from(
        self,
        source: StorageBackend,
        identifiers: IdentifierInput,
        *,
        realtime: bool = True,
    ) -> list[dict[str, Any]]:
        """Load raw records from an explicitly chosen backend."""
        ids = normalize_identifiers(identifiers)
        if not ids:
            return []
        query = self._query_factory.create(source, realtime=realtime)
        try:
            records = await query.fetch_records(ids)
        except Exception:
            self._record_query(source, "failure")
            log.error(
                "petition_query_failed",
                backend=source.value,
                realtime=realtime,
                requested=len(ids),
            )
            raise
        self._record_query(source, "success")
        log.debug(
            "petition_records_loaded",
            backend=source.value,
            realtime=realtime,
            requested=len(ids),
            found=len(records),
        )
        return records

    async def load_objects_from(
        self,
        source: StorageBackend,
        identifiers: IdentifierInput,
        *,
        realtime: bool = True,
    ) -> list[PetitionItem]:
        """Load hydrated petitions from an explicitly chosen backend."""
        ids = normalize_identifiers(identifiers)
        if not ids:
            return []
        query = self._query_factory.create(source, realtime=realtime)
        try:
            items = await query.fetch_items(ids)
        except Exception:
            self._record_query(source, "failure")
            log.error(
                "petition_query_failed",
                backend=source.value,
                realtime=realtime,
                requested=len(ids),
            )
            raise
        self._record_query(source, "success")
        log.debug(
            "petition_items_loaded",
            backend=source.value,
            realtime=realtime,
            requested=len(ids),
            found=len(items),
        )
        return items

    async def load_object_from(
        self,
        source: StorageBackend,
        identifiers: IdentifierInput,
        *,
        realtime: bool = True,
    ) -> Optional[PetitionItem]:
        """Load the first petition matching any identifier from a chosen backend.

        Used to re-resolve a petition directly against one store.
        """
        items = await self.load_objects_from(source, identifiers, realtime=realtime)
        return items[0] if items else None

    def _record_query(self, source: StorageBackend, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_backend_operation(source.value, "query", outcome)
