"""Relational store stub implementation.

In-memory stand-in for the ``petitions`` table: auto-increment entity ids
and a unique legacy_id column. Rows keep the relational shape (nested
payload); queries return flat records.

WARNING: This stub is for development/testing only.
Production uses SqlPetitionStore.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from src.application.ports.relational_store import RelationalStoreProtocol
from src.domain.models.petition_item import (
    ENTITY_ID_FIELD,
    LEGACY_ID_FIELD,
    flatten_relational_record,
)
from src.infrastructure.stubs.petition_query_stub import PetitionQueryStub, QueryCall


class RelationalStoreStub(RelationalStoreProtocol):
    """In-memory implementation of RelationalStoreProtocol.

    Attributes:
        save_calls: Copies of every record passed to save(), in order.
        delete_calls: Entity ids passed to delete(), in order.
        delete_by_legacy_id_calls: Legacy ids passed to delete_by_legacy_id().
        query_calls: Fetches issued through query() objects.
        save_error: If set, raised by save().
        fail_on_save_call: If set, only that (1-based) save call raises save_error.
        delete_error: If set, raised by both delete methods.
        query_error: If set, raised by every fetch.
    """

    def __init__(self) -> None:
        self._rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self.save_calls: list[dict[str, Any]] = []
        self.delete_calls: list[int] = []
        self.delete_by_legacy_id_calls: list[str] = []
        self.query_calls: list[QueryCall] = []
        self.save_error: Optional[Exception] = None
        self.fail_on_save_call: Optional[int] = None
        self.delete_error: Optional[Exception] = None
        self.query_error: Optional[Exception] = None

    async def save(self, record: dict[str, Any]) -> int:
        """Insert or update a row, returning its entity id.

        A record without an entity id updates the row already holding its
        legacy_id, mirroring SqlPetitionStore.

        Raises:
            ValueError: If another row already holds the record's legacy_id.
        """
        self.save_calls.append(copy.deepcopy(record))
        if self.save_error is not None and (
            self.fail_on_save_call is None
            or self.fail_on_save_call == len(self.save_calls)
        ):
            raise self.save_error

        entity_id = record.get(ENTITY_ID_FIELD)
        legacy_id = record.get(LEGACY_ID_FIELD)
        if entity_id is None and legacy_id is not None:
            entity_id = self._find_id_by_legacy_id(legacy_id)
        if entity_id is None:
            entity_id = self._next_id
        self._next_id = max(self._next_id, entity_id + 1)

        if legacy_id is not None:
            for row_id, row in self._rows.items():
                if row_id != entity_id and row.get(LEGACY_ID_FIELD) == legacy_id:
                    raise ValueError(f"duplicate legacy_id {legacy_id!r}")

        row = copy.deepcopy(record)
        row[ENTITY_ID_FIELD] = entity_id
        self._rows[entity_id] = row
        return entity_id

    async def delete(self, entity_id: int) -> None:
        """Remove a row; unknown ids are ignored."""
        self.delete_calls.append(entity_id)
        if self.delete_error is not None:
            raise self.delete_error
        self._rows.pop(entity_id, None)

    async def delete_by_legacy_id(self, legacy_id: str) -> Optional[int]:
        """Remove the row holding legacy_id, returning its entity id or None."""
        self.delete_by_legacy_id_calls.append(legacy_id)
        if self.delete_error is not None:
            raise self.delete_error
        entity_id = self._find_id_by_legacy_id(legacy_id)
        if entity_id is not None:
            del self._rows[entity_id]
        return entity_id

    def _find_id_by_legacy_id(self, legacy_id: str) -> Optional[int]:
        for row_id, row in self._rows.items():
            if row.get(LEGACY_ID_FIELD) == legacy_id:
                return row_id
        return None

    def query(self, *, realtime: bool) -> PetitionQueryStub:
        """Build a query; the stub has no replica, so freshness is recorded only."""
        return PetitionQueryStub(
            records=lambda: [flatten_relational_record(r) for r in self._rows.values()],
            realtime=realtime,
            calls=self.query_calls,
            error=self.query_error,
        )

    def get(self, entity_id: int) -> Optional[dict[str, Any]]:
        """Return a copy of a stored row, or None."""
        row = self._rows.get(entity_id)
        return copy.deepcopy(row) if row is not None else None

    def find_by_legacy_id(self, legacy_id: str) -> Optional[dict[str, Any]]:
        """Return a copy of the row holding legacy_id, or None."""
        for row in self._rows.values():
            if row.get(LEGACY_ID_FIELD) == legacy_id:
                return copy.deepcopy(row)
        return None

    def count(self) -> int:
        """Return the number of stored rows."""
        return len(self._rows)

    def clear(self) -> None:
        """Clear stored rows and call logs (for test cleanup)."""
        self._rows.clear()
        self._next_id = 1
        self.save_calls.clear()
        self.delete_calls.clear()
        self.delete_by_legacy_id_calls.clear()
        self.query_calls.clear()
