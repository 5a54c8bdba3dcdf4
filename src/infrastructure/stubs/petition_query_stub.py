"""In-memory petition query shared by the store stubs.

WARNING: This stub is for development/testing only.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from src.domain.models.petition_item import (
    PetitionIdentifier,
    PetitionItem,
    matches_identifier,
)


@dataclass
class QueryCall:
    """One recorded fetch against a stub store."""

    realtime: bool
    identifiers: list[PetitionIdentifier]


@dataclass
class PetitionQueryStub:
    """Resolves identifiers against a snapshot of flat records.

    Attributes:
        records: Callable returning the flat records visible to this query.
        realtime: Freshness the query was built with.
        calls: Shared call log of the owning stub.
        error: If set, raised by every fetch.
    """

    records: Callable[[], list[dict[str, Any]]]
    realtime: bool
    calls: list[QueryCall] = field(default_factory=list)
    error: Optional[Exception] = None

    async def fetch_records(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[dict[str, Any]]:
        self.calls.append(QueryCall(self.realtime, list(identifiers)))
        if self.error is not None:
            raise self.error
        return [
            dict(record)
            for record in self.records()
            if any(matches_identifier(record, i) for i in identifiers)
        ]

    async def fetch_items(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[PetitionItem]:
        records = await self.fetch_records(identifiers)
        return [PetitionItem.from_record(record) for record in records]
