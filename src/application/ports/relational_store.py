"""Relational store port (migration target petition table).

This module defines the abstract interface for relational persistence.
Implementations provide persistence keyed by the entity identifier the
relational store mints on first save.

Developer Golden Rules:
1. FAIL LOUD - Driver errors propagate; the orchestrator decides policy
2. EMBED LEGACY KEY - Records carry legacy_id whenever the petition has one
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from src.application.ports.petition_query import PetitionQueryProtocol


class RelationalStoreProtocol(Protocol):
    """Protocol for relational petition persistence.

    Records use the representation produced by
    PetitionItem.to_relational_record(): identity and URL columns plus a
    nested ``payload`` mapping.
    """

    async def save(self, record: dict[str, Any]) -> int:
        """Insert or update a petition row.

        If ``record["entity_id"]`` is set the row is updated. Otherwise the
        row already holding ``record["legacy_id"]`` is updated, or a new row
        is inserted and an entity identifier minted.

        Args:
            record: Relational petition record.

        Returns:
            The entity identifier of the stored row.
        """
        ...

    async def delete(self, entity_id: int) -> None:
        """Delete a petition row.

        Args:
            entity_id: The relational key.
        """
        ...

    async def delete_by_legacy_id(self, legacy_id: str) -> Optional[int]:
        """Delete the petition row embedding a legacy identifier.

        Args:
            legacy_id: The document-store key embedded in the row.

        Returns:
            The deleted row's entity identifier, or None if no row held it.
        """
        ...

    def query(self, *, realtime: bool) -> PetitionQueryProtocol:
        """Build a query object.

        Args:
            realtime: If True, read from the primary database.

        Returns:
            A query bound to the requested freshness.
        """
        ...
