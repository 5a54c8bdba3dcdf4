"""Query factory routing petition queries to a backend.

Combines the query sources of the document store and the relational store
behind PetitionQueryFactoryProtocol, so the load orchestrator only chooses
a StorageBackend and a freshness level.
"""

from __future__ import annotations

from src.application.ports.petition_query import (
    PetitionQueryProtocol,
    PetitionQuerySourceProtocol,
)
from src.domain.models.storage_backend import StorageBackend


class PetitionQueryFactory:
    """Builds freshness-bound queries for either backend."""

    def __init__(
        self,
        document_source: PetitionQuerySourceProtocol,
        relational_source: PetitionQuerySourceProtocol,
    ) -> None:
        """Initialize the factory.

        Args:
            document_source: Query source of the document store.
            relational_source: Query source of the relational store.
        """
        self._sources = {
            StorageBackend.DOCUMENT_STORE: document_source,
            StorageBackend.RELATIONAL_STORE: relational_source,
        }

    def create(
        self, source: StorageBackend, *, realtime: bool
    ) -> PetitionQueryProtocol:
        """Build a query for the given backend and freshness."""
        return self._sources[source].query(realtime=realtime)
