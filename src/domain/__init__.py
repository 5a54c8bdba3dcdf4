"""
Domain layer - Pure petition model for the dual-store migration.

This layer contains:
- PetitionItem and its record shapes
- Typed save/delete results and warnings
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or bootstrap.
Only stdlib and typing imports are allowed.
"""

from src.domain.exceptions import PetitionStoreError
from src.domain.models import PetitionItem, PetitionItemStatus, StorageBackend

__all__: list[str] = [
    "PetitionItem",
    "PetitionItemStatus",
    "PetitionStoreError",
    "StorageBackend",
]
