"""MongoDB adapter for the legacy petition collection.

Documents are stored flat. The collection key ``_id`` is exposed as the
petition's legacy_id: ObjectIds as their 24-character hex string, older
string keys unchanged.

Read Preferences:
- realtime reads, saves and deletes: PRIMARY
- non-realtime reads: SECONDARY_PREFERRED (may lag the primary)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional, Union

import structlog
from bson import ObjectId
from pymongo import ASCENDING, AsyncMongoClient, ReadPreference
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from src.application.ports.document_store import DocumentStoreProtocol
from src.config.petition_store_config import DocumentStoreConfig
from src.domain.models.petition_item import (
    ENTITY_ID_FIELD,
    LEGACY_ID_FIELD,
    PetitionIdentifier,
    PetitionItem,
    partition_identifiers,
)

log = structlog.get_logger()

MONGO_ID_FIELD = "_id"

DocumentKey = Union[ObjectId, str]


def to_document_key(legacy_id: str) -> DocumentKey:
    """Convert a legacy_id to the value stored in ``_id``."""
    if ObjectId.is_valid(legacy_id):
        return ObjectId(legacy_id)
    return legacy_id


def document_to_record(document: dict[str, Any]) -> dict[str, Any]:
    """Convert a raw collection document to the flat record shape."""
    record = {k: v for k, v in document.items() if k != MONGO_ID_FIELD}
    record[LEGACY_ID_FIELD] = str(document[MONGO_ID_FIELD])
    record.setdefault(ENTITY_ID_FIELD, None)
    return record


class MongoPetitionQuery:
    """Batch query bound to one collection handle (and its read preference)."""

    def __init__(self, collection: AsyncCollection) -> None:
        self._collection = collection

    async def fetch_records(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[dict[str, Any]]:
        legacy_ids, entity_ids = partition_identifiers(identifiers)
        clauses: list[dict[str, Any]] = []
        if legacy_ids:
            keys = [to_document_key(i) for i in legacy_ids]
            clauses.append({MONGO_ID_FIELD: {"$in": keys}})
        if entity_ids:
            clauses.append({ENTITY_ID_FIELD: {"$in": entity_ids}})
        if not clauses:
            return []

        cursor = self._collection.find({"$or": clauses})
        documents = await cursor.to_list(None)
        return [document_to_record(document) for document in documents]

    async def fetch_items(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[PetitionItem]:
        records = await self.fetch_records(identifiers)
        return [PetitionItem.from_record(record) for record in records]


class MongoPetitionStore(DocumentStoreProtocol):
    """DocumentStoreProtocol backed by a pymongo async collection."""

    def __init__(self, database: AsyncDatabase, collection_name: str) -> None:
        """Initialize the store.

        Args:
            database: Async database handle.
            collection_name: Name of the petition collection.
        """
        self._primary: AsyncCollection = database.get_collection(
            collection_name, read_preference=ReadPreference.PRIMARY
        )
        self._secondary: AsyncCollection = database.get_collection(
            collection_name, read_preference=ReadPreference.SECONDARY_PREFERRED
        )

    @classmethod
    def from_config(
        cls, config: DocumentStoreConfig, client: Optional[AsyncMongoClient] = None
    ) -> "MongoPetitionStore":
        """Build a store from configuration.

        Raises:
            ValueError: If no client is given and MONGO_URL is unset.
        """
        if client is None:
            if not config.is_configured:
                raise ValueError("MONGO_URL is not configured")
            client = AsyncMongoClient(config.url)
        return cls(client[config.database], config.collection)

    async def save(self, document: dict[str, Any]) -> str:
        """Insert a new document or replace an existing one.

        Args:
            document: Flat document; legacy_id selects insert (None) or upsert.

        Returns:
            The legacy_id of the stored document.
        """
        body = {k: v for k, v in document.items() if k != LEGACY_ID_FIELD}
        legacy_id = document.get(LEGACY_ID_FIELD)
        if legacy_id is None:
            result = await self._primary.insert_one(body)
            legacy_id = str(result.inserted_id)
            log.debug("mongo_petition_inserted", legacy_id=legacy_id)
            return legacy_id

        await self._primary.replace_one(
            {MONGO_ID_FIELD: to_document_key(legacy_id)}, body, upsert=True
        )
        log.debug("mongo_petition_replaced", legacy_id=legacy_id)
        return str(legacy_id)

    async def delete(self, legacy_id: str) -> None:
        result = await self._primary.delete_one(
            {MONGO_ID_FIELD: to_document_key(legacy_id)}
        )
        log.debug(
            "mongo_petition_deleted",
            legacy_id=legacy_id,
            deleted_count=result.deleted_count,
        )

    def query(self, *, realtime: bool) -> MongoPetitionQuery:
        return MongoPetitionQuery(self._primary if realtime else self._secondary)

    async def fetch_page(
        self, after_legacy_id: Optional[str], limit: int
    ) -> list[dict[str, Any]]:
        """Page through the collection in ``_id`` order (primary reads)."""
        criteria: dict[str, Any] = {}
        if after_legacy_id is not None:
            criteria[MONGO_ID_FIELD] = {"$gt": to_document_key(after_legacy_id)}
        cursor = self._primary.find(criteria).sort(MONGO_ID_FIELD, ASCENDING).limit(limit)
        documents = await cursor.to_list(None)
        return [document_to_record(document) for document in documents]
