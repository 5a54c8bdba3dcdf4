"""Document store stub implementation.

In-memory stand-in for the MongoDB petition collection. Legacy ids are
24-character hex strings that sort in insertion order, like ObjectIds.

Non-realtime queries read a replica view. By default the replica is in
sync; freeze_replica() pins it to the current contents so tests can
observe replication lag.

WARNING: This stub is for development/testing only.
Production uses MongoPetitionStore.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from src.application.ports.document_store import DocumentStoreProtocol
from src.domain.models.petition_item import LEGACY_ID_FIELD
from src.infrastructure.stubs.petition_query_stub import PetitionQueryStub, QueryCall


class DocumentStoreStub(DocumentStoreProtocol):
    """In-memory implementation of DocumentStoreProtocol.

    Attributes:
        save_calls: Copies of every document passed to save(), in order.
        delete_calls: Legacy ids passed to delete(), in order.
        query_calls: Fetches issued through query() objects.
        save_error: If set, raised by save().
        delete_error: If set, raised by delete().
        query_error: If set, raised by every fetch.
    """

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._replica: Optional[dict[str, dict[str, Any]]] = None
        self._next_id = 1
        self.save_calls: list[dict[str, Any]] = []
        self.delete_calls: list[str] = []
        self.query_calls: list[QueryCall] = []
        self.save_error: Optional[Exception] = None
        self.delete_error: Optional[Exception] = None
        self.query_error: Optional[Exception] = None

    async def save(self, document: dict[str, Any]) -> str:
        """Insert or upsert a document, returning its legacy id."""
        self.save_calls.append(copy.deepcopy(document))
        if self.save_error is not None:
            raise self.save_error

        legacy_id = document.get(LEGACY_ID_FIELD)
        if legacy_id is None:
            legacy_id = self._mint_id()
        stored = copy.deepcopy(document)
        stored[LEGACY_ID_FIELD] = legacy_id
        self._documents[legacy_id] = stored
        return legacy_id

    async def delete(self, legacy_id: str) -> None:
        """Remove a document; unknown ids are ignored."""
        self.delete_calls.append(legacy_id)
        if self.delete_error is not None:
            raise self.delete_error
        self._documents.pop(legacy_id, None)

    def query(self, *, realtime: bool) -> PetitionQueryStub:
        """Build a query over the primary (realtime) or the replica view."""
        if realtime or self._replica is None:
            source = self._documents
        else:
            source = self._replica
        return PetitionQueryStub(
            records=lambda: list(source.values()),
            realtime=realtime,
            calls=self.query_calls,
            error=self.query_error,
        )

    async def fetch_page(
        self, after_legacy_id: Optional[str], limit: int
    ) -> list[dict[str, Any]]:
        """Return up to ``limit`` documents with legacy ids after the cursor."""
        ordered = sorted(self._documents)
        if after_legacy_id is not None:
            ordered = [i for i in ordered if i > after_legacy_id]
        return [copy.deepcopy(self._documents[i]) for i in ordered[:limit]]

    def freeze_replica(self) -> None:
        """Pin the replica view to the current contents."""
        self._replica = copy.deepcopy(self._documents)

    def sync_replica(self) -> None:
        """Let the replica view follow the primary again."""
        self._replica = None

    def seed(self, document: dict[str, Any]) -> str:
        """Store a document directly, bypassing call recording."""
        legacy_id = document.get(LEGACY_ID_FIELD) or self._mint_id()
        stored = copy.deepcopy(document)
        stored[LEGACY_ID_FIELD] = legacy_id
        self._documents[legacy_id] = stored
        return legacy_id

    def get(self, legacy_id: str) -> Optional[dict[str, Any]]:
        """Return a copy of a stored document, or None."""
        document = self._documents.get(legacy_id)
        return copy.deepcopy(document) if document is not None else None

    def count(self) -> int:
        """Return the number of stored documents."""
        return len(self._documents)

    def clear(self) -> None:
        """Clear stored documents and call logs (for test cleanup)."""
        self._documents.clear()
        self._replica = None
        self.save_calls.clear()
        self.delete_calls.clear()
        self.query_calls.clear()

    def _mint_id(self) -> str:
        legacy_id = f"{self._next_id:024x}"
        self._next_id += 1
        return legacy_id
