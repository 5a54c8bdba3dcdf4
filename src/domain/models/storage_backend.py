"""Storage backend identifiers for the petition migration."""

from __future__ import annotations

from enum import Enum


class StorageBackend(str, Enum):
    """The two stores a petition can live in during migration.

    Values:
        DOCUMENT_STORE: Legacy MongoDB store keyed by legacy_id.
        RELATIONAL_STORE: Migration target keyed by entity_id.
    """

    DOCUMENT_STORE = "document_store"
    RELATIONAL_STORE = "relational_store"
