"""Document store port (legacy MongoDB petition collection).

This module defines the abstract interface for document-store persistence.
Implementations provide persistence keyed by the legacy identifier the
document store mints on first save.

Developer Golden Rules:
1. FAIL LOUD - Driver errors propagate; the orchestrator decides policy
2. PRIMARY FOR WRITES - Saves and deletes always use the primary
3. STABLE KEYS - Saving a document that carries a legacy_id reuses it
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from src.application.ports.petition_query import PetitionQueryProtocol


class DocumentStoreProtocol(Protocol):
    """Protocol for document-store petition persistence.

    Documents use the flat representation produced by
    PetitionItem.to_document(): payload keys at the top level plus the
    identity and URL fields.
    """

    async def save(self, document: dict[str, Any]) -> str:
        """Insert or replace a petition document.

        If ``document["legacy_id"]`` is set the existing document is replaced
        (upserted); otherwise a new document is inserted and a legacy
        identifier minted.

        Args:
            document: Flat petition document.

        Returns:
            The legacy identifier of the stored document.
        """
        ...

    async def delete(self, legacy_id: str) -> None:
        """Delete a petition document on the primary connection.

        Args:
            legacy_id: The document-store key.
        """
        ...

    def query(self, *, realtime: bool) -> PetitionQueryProtocol:
        """Build a query object.

        Args:
            realtime: If True, read from the primary (not slave-tolerant).

        Returns:
            A query bound to the requested freshness.
        """
        ...

    async def fetch_page(
        self, after_legacy_id: Optional[str], limit: int
    ) -> list[dict[str, Any]]:
        """Fetch a page of documents ordered by legacy identifier.

        Used by migration tooling to walk the whole collection.

        Args:
            after_legacy_id: Exclusive lower bound, or None to start at the top.
            limit: Maximum number of documents to return.

        Returns:
            Flat records ordered by legacy_id.
        """
        ...
