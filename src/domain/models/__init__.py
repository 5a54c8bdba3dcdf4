"""Domain models for the petition dual-store."""

from src.domain.models.dual_store_result import (
    DeleteResult,
    SaveResult,
    StoreWarning,
    StoreWarningKind,
)
from src.domain.models.petition_item import (
    ENTITY_ID_FIELD,
    LEGACY_ID_FIELD,
    PetitionIdentifier,
    PetitionItem,
    PetitionItemStatus,
    flatten_relational_record,
    matches_identifier,
    partition_identifiers,
)
from src.domain.models.storage_backend import StorageBackend

__all__: list[str] = [
    "DeleteResult",
    "ENTITY_ID_FIELD",
    "LEGACY_ID_FIELD",
    "PetitionIdentifier",
    "PetitionItem",
    "PetitionItemStatus",
    "SaveResult",
    "StorageBackend",
    "StoreWarning",
    "StoreWarningKind",
    "flatten_relational_record",
    "matches_identifier",
    "partition_identifiers",
]
