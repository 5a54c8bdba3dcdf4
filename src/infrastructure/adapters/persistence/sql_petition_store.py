"""SQLAlchemy adapter for the relational ``petitions`` table.

Each row holds the identity and URL columns plus the opaque payload as
JSON. ``id`` is the petition's entity_id; ``legacy_id`` is unique so a
document can be linked to at most one row.

Realtime queries use the primary session factory; non-realtime queries use
the replica session factory when one is configured.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional

import structlog
from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    Integer,
    MetaData,
    String,
    Table,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.application.ports.relational_store import RelationalStoreProtocol
from src.domain.models.petition_item import (
    ENTITY_ID_FIELD,
    LEGACY_ID_FIELD,
    PetitionIdentifier,
    PetitionItem,
    flatten_relational_record,
    partition_identifiers,
)

log = structlog.get_logger()

metadata = MetaData()

petitions_table = Table(
    "petitions",
    metadata,
    Column(
        "id",
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    ),
    Column("legacy_id", String(64), unique=True, nullable=True),
    Column("status", String(32), nullable=False),
    Column("nice_url", String(512), nullable=True),
    Column("short_url", String(255), nullable=True),
    Column("legacy_path", String(512), nullable=True),
    Column("payload", JSON, nullable=False),
)

_VALUE_COLUMNS = ("legacy_id", "status", "nice_url", "short_url", "legacy_path")


def record_to_row_values(record: dict[str, Any]) -> dict[str, Any]:
    """Map a relational record to column values (without ``id``)."""
    values = {column: record.get(column) for column in _VALUE_COLUMNS}
    values["payload"] = dict(record.get("payload") or {})
    return values


def row_to_record(row: Any) -> dict[str, Any]:
    """Map a result row mapping to the flat record shape."""
    return flatten_relational_record(
        {
            ENTITY_ID_FIELD: row["id"],
            LEGACY_ID_FIELD: row["legacy_id"],
            "status": row["status"],
            "nice_url": row["nice_url"],
            "short_url": row["short_url"],
            "legacy_path": row["legacy_path"],
            "payload": row["payload"],
        }
    )


class SqlPetitionQuery:
    """Batch query bound to one session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_records(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[dict[str, Any]]:
        legacy_ids, entity_ids = partition_identifiers(identifiers)
        conditions = []
        if entity_ids:
            conditions.append(petitions_table.c.id.in_(entity_ids))
        if legacy_ids:
            conditions.append(petitions_table.c.legacy_id.in_(legacy_ids))
        if not conditions:
            return []

        statement = select(petitions_table).where(or_(*conditions))
        async with self._session_factory() as session:
            result = await session.execute(statement)
            rows = result.mappings().all()
        return [row_to_record(row) for row in rows]

    async def fetch_items(
        self, identifiers: Sequence[PetitionIdentifier]
    ) -> list[PetitionItem]:
        records = await self.fetch_records(identifiers)
        return [PetitionItem.from_record(record) for record in records]


class SqlPetitionStore(RelationalStoreProtocol):
    """RelationalStoreProtocol backed by SQLAlchemy async Core."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        replica_session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ) -> None:
        """Initialize the store.

        Args:
            session_factory: Primary database session factory.
            replica_session_factory: Optional read-replica factory for
                non-realtime reads.
        """
        self._session_factory = session_factory
        self._replica_session_factory = replica_session_factory

    async def save(self, record: dict[str, Any]) -> int:
        """Insert a new row or update the row with the record's entity_id.

        A record without an entity_id updates the row already holding its
        legacy_id, if any. A record carrying an entity_id with no matching
        row is inserted under that id.

        Returns:
            The row's entity_id.
        """
        values = record_to_row_values(record)
        entity_id = record.get(ENTITY_ID_FIELD)

        async with self._session_factory() as session:
            async with session.begin():
                if entity_id is None and values[LEGACY_ID_FIELD] is not None:
                    entity_id = await self._find_id_by_legacy_id(
                        session, values[LEGACY_ID_FIELD]
                    )
                if entity_id is None:
                    result = await session.execute(
                        insert(petitions_table).values(**values)
                    )
                    entity_id = int(result.inserted_primary_key[0])
                    log.debug(
                        "sql_petition_inserted",
                        entity_id=entity_id,
                        legacy_id=values[LEGACY_ID_FIELD],
                    )
                    return entity_id

                result = await session.execute(
                    update(petitions_table)
                    .where(petitions_table.c.id == entity_id)
                    .values(**values)
                )
                if result.rowcount == 0:
                    await session.execute(
                        insert(petitions_table).values(id=entity_id, **values)
                    )
                    log.debug("sql_petition_inserted_with_id", entity_id=entity_id)
                else:
                    log.debug("sql_petition_updated", entity_id=entity_id)
        return int(entity_id)

    async def delete(self, entity_id: int) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    petitions_table.delete().where(petitions_table.c.id == entity_id)
                )
        log.debug("sql_petition_deleted", entity_id=entity_id, rowcount=result.rowcount)

    async def delete_by_legacy_id(self, legacy_id: str) -> Optional[int]:
        """Delete the row holding legacy_id.

        Returns:
            The deleted row's entity_id, or None if no row held legacy_id.
        """
        async with self._session_factory() as session:
            async with session.begin():
                entity_id = await self._find_id_by_legacy_id(session, legacy_id)
                if entity_id is None:
                    return None
                await session.execute(
                    petitions_table.delete().where(petitions_table.c.id == entity_id)
                )
        log.debug(
            "sql_petition_deleted_by_legacy_id",
            entity_id=entity_id,
            legacy_id=legacy_id,
        )
        return entity_id

    @staticmethod
    async def _find_id_by_legacy_id(
        session: AsyncSession, legacy_id: str
    ) -> Optional[int]:
        result = await session.execute(
            select(petitions_table.c.id).where(
                petitions_table.c.legacy_id == legacy_id
            )
        )
        entity_id = result.scalar_one_or_none()
        return int(entity_id) if entity_id is not None else None

    def query(self, *, realtime: bool) -> SqlPetitionQuery:
        if realtime or self._replica_session_factory is None:
            return SqlPetitionQuery(self._session_factory)
        return SqlPetitionQuery(self._replica_session_factory)
