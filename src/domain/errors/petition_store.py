"""Petition dual-store domain errors.

This module provides exception classes for failures while saving, loading,
or deleting a petition across the document store and the relational store.

Propagation Policy:
- Identifier conflicts are ALWAYS fatal and surfaced
- Authoritative write failures are ALWAYS surfaced
- Non-authoritative failures (short URL, document-store delete) are
  converted into StoreWarning entries by the orchestrators
"""

from __future__ import annotations

from typing import Any

from src.domain.exceptions import PetitionStoreError


class IdentityConflictError(PetitionStoreError):
    """Raised when reconciliation would overwrite an existing identifier.

    A petition keeps the same legacy_id and entity_id for its whole lifetime.
    Receiving a different value from a backend indicates a data-integrity
    risk, so the current call is aborted.

    Attributes:
        field: The identifier field ("legacy_id" or "entity_id").
        existing: The value already held by the petition.
        incoming: The conflicting value returned by the backend.
    """

    def __init__(self, field: str, existing: Any, incoming: Any) -> None:
        """Initialize the error.

        Args:
            field: The identifier field ("legacy_id" or "entity_id").
            existing: The value already held by the petition.
            incoming: The conflicting value returned by the backend.
        """
        self.field = field
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Identity conflict on {field}: petition already has {existing!r}, "
            f"backend returned {incoming!r}"
        )


class MissingIdentityError(PetitionStoreError):
    """Raised when an identifier is required but not yet assigned.

    Attributes:
        field: The identifier field that is unset.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        """Initialize the error.

        Args:
            field: The identifier field that is unset.
            message: Optional detail message.
        """
        self.field = field
        super().__init__(message or f"Petition has no {field}")


class BackendWriteError(PetitionStoreError):
    """Base error for a failed backend save or delete.

    Attributes:
        operation: The backend operation that failed ("save" or "delete").
        identifier: Identifier involved in the operation, if known.
    """

    backend_name: str = "backend"

    def __init__(
        self,
        operation: str,
        identifier: str | int | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            operation: The backend operation that failed.
            identifier: Identifier involved in the operation, if known.
            reason: Description of the underlying failure.
        """
        self.operation = operation
        self.identifier = identifier
        self.reason = reason
        target = f" for {identifier}" if identifier is not None else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"{self.backend_name} {operation} failed{target}{detail}")


class DocumentStoreWriteFailedError(BackendWriteError):
    """Raised when the document-store save fails.

    Aborts the whole save: the relational record may depend on the
    legacy identifier, so the relational step never starts.
    """

    backend_name = "Document store"


class RelationalWriteFailedError(BackendWriteError):
    """Raised when a relational save or delete fails.

    Surfaced only when the relational store is the authoritative target
    of the call. Otherwise the orchestrator reports it as a warning and
    leaves prior document-store writes intact.
    """

    backend_name = "Relational store"


class ShortUrlUnavailableError(PetitionStoreError):
    """Raised when the URL-shortening collaborator fails.

    Non-fatal: the save proceeds without a short URL.

    Attributes:
        long_url: The URL that could not be shortened.
    """

    def __init__(self, long_url: str, reason: str | None = None) -> None:
        """Initialize the error.

        Args:
            long_url: The URL that could not be shortened.
            reason: Description of the underlying failure.
        """
        self.long_url = long_url
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Short URL unavailable for {long_url}{detail}")


class PetitionNotFoundError(PetitionStoreError):
    """Raised when a delete or load target does not exist.

    Attributes:
        identifier: The identifier that could not be resolved.
    """

    def __init__(self, identifier: str | int) -> None:
        """Initialize the error.

        Args:
            identifier: The identifier that could not be resolved.
        """
        self.identifier = identifier
        super().__init__(f"Petition not found: {identifier}")


class NoReadSourceConfiguredError(PetitionStoreError):
    """Raised when neither the document store nor the relational store is readable."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__(
            "No read source configured: both mongo-read and mysql-read are disabled"
        )
