"""Typed results for dual-store save and delete operations.

Non-fatal failures (short URL unavailable, relational write failure behind
a successful document write, best-effort document-store delete) are carried
on the result as StoreWarning entries so callers can inspect them instead
of relying on a side-channel log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from src.domain.models.storage_backend import StorageBackend


class StoreWarningKind(str, Enum):
    """Kinds of non-fatal conditions reported on results."""

    SHORT_URL_UNAVAILABLE = "short_url_unavailable"
    RELATIONAL_WRITE_FAILED = "relational_write_failed"
    DOCUMENT_STORE_DELETE_FAILED = "document_store_delete_failed"


@dataclass(frozen=True)
class StoreWarning:
    """A non-fatal condition that occurred during a dual-store call.

    Attributes:
        kind: What went wrong.
        backend: The backend involved, or None for external collaborators.
        message: Human-readable detail (the underlying error text).
    """

    kind: StoreWarningKind
    backend: Optional[StorageBackend]
    message: str


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a dual-write save.

    Attributes:
        legacy_id: Document-store key after the save (None if never written).
        entity_id: Relational key after the save (None if never written).
        nice_url: Canonical URL after the save.
        short_url: Short URL after the save.
        document_store_written: Whether the document store was written.
        relational_store_written: Whether the relational store was written.
        warnings: Non-fatal conditions, in the order they occurred.
    """

    legacy_id: Optional[str]
    entity_id: Optional[int]
    nice_url: Optional[str]
    short_url: Optional[str]
    document_store_written: bool = False
    relational_store_written: bool = False
    warnings: tuple[StoreWarning, ...] = field(default_factory=tuple)

    @property
    def persisted(self) -> bool:
        """Return True if at least one backend was written."""
        return self.document_store_written or self.relational_store_written

    def has_warning(self, kind: StoreWarningKind) -> bool:
        """Check whether a warning of the given kind was recorded."""
        return any(w.kind == kind for w in self.warnings)


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a dual-store delete.

    Attributes:
        legacy_id: Legacy identifier of the deleted petition, if known.
        entity_id: Entity identifier of the deleted petition, if known.
        document_store_deleted: Whether the document-store delete succeeded.
        relational_store_deleted: Whether the relational delete succeeded.
        warnings: Non-fatal conditions, in the order they occurred.
    """

    legacy_id: Optional[str]
    entity_id: Optional[int]
    document_store_deleted: bool = False
    relational_store_deleted: bool = False
    warnings: tuple[StoreWarning, ...] = field(default_factory=tuple)

    def has_warning(self, kind: StoreWarningKind) -> bool:
        """Check whether a warning of the given kind was recorded."""
        return any(w.kind == kind for w in self.warnings)
