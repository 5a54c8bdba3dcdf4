"""Petition query port.

A query object resolves a whole set of identifiers against one backend in a
single call, returning either raw flat records or hydrated PetitionItems.
Missing identifiers are simply absent from the result; result order is not
guaranteed to match input order.

Developer Golden Rules:
1. ONE CALL PER BATCH - Never issue a backend call per identifier
2. MISSES ARE NOT ERRORS - Absent ids are dropped silently
3. FLAT RECORDS - Raw records use the PetitionItem flat record shape
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from src.domain.models.petition_item import PetitionIdentifier, PetitionItem
from src.domain.models.storage_backend import StorageBackend


class PetitionQueryProtocol(Protocol):
    """Protocol for a freshness-bound query against one backend."""

    async def fetch_records(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[dict[str, Any]]:
        """Fetch raw flat records for the given identifiers.

        Args:
            identifiers: legacy ids (str) and/or entity ids (int).

        Returns:
            Flat records for the identifiers that exist.
        """
        ...

    async def fetch_items(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[PetitionItem]:
        """Fetch hydrated petitions for the given identifiers.

        Args:
            identifiers: legacy ids (str) and/or entity ids (int).

        Returns:
            PetitionItems for the identifiers that exist.
        """
        ...


class PetitionQuerySourceProtocol(Protocol):
    """Protocol for a backend that can build queries at a freshness level."""

    def query(self, *, realtime: bool) -> PetitionQueryProtocol:
        """Build a query object.

        Args:
            realtime: If True, the query must read its own writes (primary).
                      If False, a possibly-lagging replica path is allowed.

        Returns:
            A query bound to the requested freshness.
        """
        ...


class PetitionQueryFactoryProtocol(Protocol):
    """Protocol for building queries against a selected backend."""

    def create(
        self, source: StorageBackend, *, realtime: bool
    ) -> PetitionQueryProtocol:
        """Build a query for the given backend and freshness.

        Args:
            source: The backend to query.
            realtime: Whether the query must reflect the latest commit.

        Returns:
            A query object for the backend.
        """
        ...

