"""Domain errors for the petition dual-store.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from PetitionStoreError.
"""

from src.domain.errors.petition_store import (
    BackendWriteError,
    DocumentStoreWriteFailedError,
    IdentityConflictError,
    MissingIdentityError,
    NoReadSourceConfiguredError,
    PetitionNotFoundError,
    RelationalWriteFailedError,
    ShortUrlUnavailableError,
)

__all__: list[str] = [
    "BackendWriteError",
    "DocumentStoreWriteFailedError",
    "IdentityConflictError",
    "MissingIdentityError",
    "NoReadSourceConfiguredError",
    "PetitionNotFoundError",
    "RelationalWriteFailedError",
    "ShortUrlUnavailableError",
]
