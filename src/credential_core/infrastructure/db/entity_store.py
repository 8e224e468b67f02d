"""SQLAlchemy adapter implementing the entity store port over one table."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from credential_core.application.ports.entity_store_port import EntityStorePort, PersistHook

EntityT = TypeVar("EntityT")
logger = logging.getLogger(__name__)


class SqlAlchemyEntityStore(EntityStorePort, Generic[EntityT]):
    """Entity store backed by SQLAlchemy async sessions.

    Entities are plain objects built by `entity_factory` from row mappings.
    Only attributes that match table columns are written, so transient
    attributes such as the plaintext password never reach the database.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        table: sa.Table,
        entity_factory: Callable[..., EntityT],
        primary_key: str = "id",
    ) -> None:
        self._session_factory = session_factory
        self._table = table
        self._entity_factory = entity_factory
        self._primary_key = primary_key
        self._before_persist: list[PersistHook] = []
        self._after_persist: list[PersistHook] = []

    def add_before_persist(self, hook: PersistHook) -> None:
        self._before_persist.append(hook)

    def add_after_persist(self, hook: PersistHook) -> None:
        self._after_persist.append(hook)

    async def find_one_by(self, *, field: str, value: object) -> EntityT | None:
        """Return the first entity whose column equals the value."""

        if field not in self._table.c:
            raise ValueError(f"unknown column for {self._table.name}: {field}")

        statement = sa.select(self._table).where(self._table.c[field] == value).limit(1)
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return self._entity_factory(**dict(row))

    async def persist(self, entity: EntityT) -> EntityT:
        """Run hooks and INSERT or UPDATE the entity; a raising hook aborts the write."""

        is_new = getattr(entity, self._primary_key, None) is None
        for hook in self._before_persist:
            hook(entity, is_new=is_new)

        values = self._column_values(entity)
        async with self._session_factory() as session:
            if is_new:
                result = await session.execute(sa.insert(self._table).values(**values))
                setattr(entity, self._primary_key, result.inserted_primary_key[0])
            else:
                primary_key_column = self._table.c[self._primary_key]
                await session.execute(
                    sa.update(self._table)
                    .where(primary_key_column == getattr(entity, self._primary_key))
                    .values(**values)
                )
            await session.commit()

        logger.info(
            "entity_persisted table=%s %s=%s is_new=%s",
            self._table.name,
            self._primary_key,
            getattr(entity, self._primary_key),
            is_new,
        )
        for hook in self._after_persist:
            hook(entity, is_new=is_new)
        return entity

    def _column_values(self, entity: EntityT) -> dict[str, Any]:
        return {
            column.name: getattr(entity, column.name)
            for column in self._table.columns
            if column.name != self._primary_key and hasattr(entity, column.name)
        }
