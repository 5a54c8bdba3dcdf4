"""Petition item domain model for the dual-store migration.

This module defines the mutable in-memory representation of one petition
while it is saved to, or loaded from, the document store and the
relational store:
- PetitionItem: identity, status and derived URL fields plus opaque payload
- PetitionItemStatus: lifecycle status (DRAFT suppresses short URLs)
- PetitionIdentifier: str (legacy_id) or int (entity_id)

Invariants:
- legacy_id is immutable once set (re-saves reuse it)
- entity_id is immutable once set
- short_url is never set while status is DRAFT
- legacy_path mirrors the path component of nice_url

The orchestrators mutate identifier and URL fields only. Everything else
lives in ``payload`` and is passed through untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

PetitionIdentifier = Union[str, int]

# Fields owned by the dual-store layer; everything else is payload
LEGACY_ID_FIELD = "legacy_id"
ENTITY_ID_FIELD = "entity_id"
IDENTITY_FIELDS: tuple[str, ...] = (
    LEGACY_ID_FIELD,
    ENTITY_ID_FIELD,
    "status",
    "nice_url",
    "short_url",
    "legacy_path",
)


class PetitionItemStatus(str, Enum):
    """Lifecycle status of a petition.

    Values:
        DRAFT: Not yet public; never receives a short URL.
        PUBLISHED: Open for signatures.
        UNDER_REVIEW: Signature threshold reached, awaiting response.
        REVIEWED: Response published.
        ARCHIVED: Closed and no longer listed.

    Values written by older document-store clients outside this set are
    kept verbatim as non-draft pseudo-members, so re-saving a petition
    never rewrites its status.
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    UNDER_REVIEW = "under_review"
    REVIEWED = "reviewed"
    ARCHIVED = "archived"

    @classmethod
    def _missing_(cls, value: object) -> "PetitionItemStatus | None":
        if not isinstance(value, str) or not value:
            return None
        member = str.__new__(cls, value)
        member._name_ = value.upper()
        member._value_ = value
        return member


@dataclass(eq=True)
class PetitionItem:
    """A petition as handled by the save, load and delete orchestrators.

    Attributes:
        status: Current lifecycle status.
        legacy_id: Document-store key, unset until a document save succeeds.
        entity_id: Relational key, unset until a relational save succeeds.
        nice_url: Canonical human-readable URL (derived).
        short_url: Shortened URL (derived, non-draft only).
        legacy_path: Path of nice_url, mirrored for document-store consumers.
        payload: Opaque domain fields (title, body, signatures, ...).
    """

    status: PetitionItemStatus = PetitionItemStatus.DRAFT
    legacy_id: str | None = None
    entity_id: int | None = None
    nice_url: str | None = None
    short_url: str | None = None
    legacy_path: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_draft(self) -> bool:
        """Return True if the petition is a draft."""
        return self.status == PetitionItemStatus.DRAFT

    @property
    def title(self) -> str | None:
        """Return the payload title, if any (used for URL slugs)."""
        value = self.payload.get("title")
        return str(value) if value else None

    def identifiers(self) -> list[PetitionIdentifier]:
        """Return every identifier this petition can be addressed by."""
        found: list[PetitionIdentifier] = []
        if self.legacy_id is not None:
            found.append(self.legacy_id)
        if self.entity_id is not None:
            found.append(self.entity_id)
        return found

    def apply_nice_url(self, nice_url: str, path: str) -> None:
        """Set nice_url and mirror its path into legacy_path.

        Args:
            nice_url: The absolute canonical URL.
            path: The path component of nice_url.
        """
        self.nice_url = nice_url
        self.legacy_path = path

    def derived_fields(self) -> tuple[str | None, str | None, str | None]:
        """Return (nice_url, short_url, legacy_path) for change detection."""
        return (self.nice_url, self.short_url, self.legacy_path)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the document store's flat representation.

        Payload keys sit at the top level; identity and URL fields override
        any payload key of the same name.

        Returns:
            A new flat dictionary.
        """
        document = {
            key: value
            for key, value in self.payload.items()
            if key not in IDENTITY_FIELDS
        }
        document.update(
            {
                LEGACY_ID_FIELD: self.legacy_id,
                ENTITY_ID_FIELD: self.entity_id,
                "status": self.status.value,
                "nice_url": self.nice_url,
                "short_url": self.short_url,
                "legacy_path": self.legacy_path,
            }
        )
        return document

    def to_relational_record(self) -> dict[str, Any]:
        """Serialize to the relational representation.

        The legacy identifier is always embedded when set, so the
        relational row can be traced back to its document.

        Returns:
            A new dictionary with identity columns and a nested payload.
        """
        return {
            ENTITY_ID_FIELD: self.entity_id,
            LEGACY_ID_FIELD: self.legacy_id,
            "status": self.status.value,
            "nice_url": self.nice_url,
            "short_url": self.short_url,
            "legacy_path": self.legacy_path,
            "payload": {
                key: value
                for key, value in self.payload.items()
                if key not in IDENTITY_FIELDS
            },
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PetitionItem":
        """Hydrate a petition from a flat backend record.

        Args:
            record: Flat mapping as returned by a petition query.

        Returns:
            A new PetitionItem. Unknown keys become payload.
        """
        legacy_id = record.get(LEGACY_ID_FIELD)
        entity_id = record.get(ENTITY_ID_FIELD)
        status = record.get("status") or PetitionItemStatus.DRAFT.value
        return cls(
            status=PetitionItemStatus(status),
            legacy_id=str(legacy_id) if legacy_id is not None else None,
            entity_id=int(entity_id) if entity_id is not None else None,
            nice_url=record.get("nice_url"),
            short_url=record.get("short_url"),
            legacy_path=record.get("legacy_path"),
            payload={
                key: value
                for key, value in record.items()
                if key not in IDENTITY_FIELDS
            },
        )


def partition_identifiers(
    identifiers: Iterable[PetitionIdentifier],
) -> tuple[list[str], list[int]]:
    """Split identifiers into legacy ids (str) and entity ids (int).

    Duplicates are dropped; first-seen order is preserved.

    Args:
        identifiers: Mixed collection of identifiers.

    Returns:
        Tuple of (legacy_ids, entity_ids).

    Raises:
        TypeError: If an identifier is neither str nor int.
    """
    legacy_ids: list[str] = []
    entity_ids: list[int] = []
    for identifier in identifiers:
        # bool is an int subclass but never a valid entity id
        if isinstance(identifier, bool):
            raise TypeError(f"Invalid petition identifier: {identifier!r}")
        if isinstance(identifier, int):
            if identifier not in entity_ids:
                entity_ids.append(identifier)
        elif isinstance(identifier, str):
            if identifier not in legacy_ids:
                legacy_ids.append(identifier)
        else:
            raise TypeError(f"Invalid petition identifier: {identifier!r}")
    return legacy_ids, entity_ids


def matches_identifier(record: Mapping[str, Any], identifier: PetitionIdentifier) -> bool:
    """Return True if a flat record is addressed by the identifier."""
    if isinstance(identifier, int) and not isinstance(identifier, bool):
        return record.get(ENTITY_ID_FIELD) == identifier
    return record.get(LEGACY_ID_FIELD) == identifier


def flatten_relational_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Turn a relational record (nested payload) into the flat record shape.

    Args:
        record: Mapping produced by to_relational_record() or read from a row.

    Returns:
        A new flat dictionary, payload keys at the top level.
    """
    flat = {
        key: value
        for key, value in (record.get("payload") or {}).items()
        if key not in IDENTITY_FIELDS
    }
    for key in IDENTITY_FIELDS:
        flat[key] = record.get(key)
    return flat
