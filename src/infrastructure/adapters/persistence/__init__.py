"""Persistence adapters for the document store and the relational store."""

from src.infrastructure.adapters.persistence.mongo_petition_store import (
    MongoPetitionQuery,
    MongoPetitionStore,
)
from src.infrastructure.adapters.persistence.sql_petition_store import (
    SqlPetitionQuery,
    SqlPetitionStore,
    metadata,
    petitions_table,
)

__all__ = [
    "MongoPetitionQuery",
    "MongoPetitionStore",
    "SqlPetitionQuery",
    "SqlPetitionStore",
    "metadata",
    "petitions_table",
]
