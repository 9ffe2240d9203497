"""
Base repository implementation.

This module provides the generic CRUD repository every entity is accessed
through. ``save`` follows the contract of a Spring Data ``JpaRepository``, under
which ``dataclasses.replace()`` copies become duplicate inserts or silent
merges:

- ``save`` adds an entity whose primary key is unset and merges any other
  entity that the session does not already track.
- Nothing commits here; the caller owns the transaction.
"""

from __future__ import annotations

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

EntityType = TypeVar("EntityType")


class EntityNotFoundError(LookupError):
    """Raised when an entity looked up by primary key does not exist."""

    def __init__(self, model: Type[Any], entity_id: Any) -> None:
        self.model = model
        self.entity_id = entity_id
        super().__init__(f"{model.__name__} with id {entity_id!r} not found")


class AsyncCrudRepository(Generic[EntityType]):
    """Generic async CRUD repository bound to one mapped class."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and mapped entity class.

        Args:
            session: Async SQLAlchemy session for database operations
            model: Mapped entity class for this repository
        """
        self.session = session
        self.model = model

    def _is_new(self, entity: EntityType) -> bool:
        mapper = inspect(self.model)
        return all(value is None for value in mapper.primary_key_from_instance(entity))

    async def save(self, entity: EntityType) -> EntityType:
        """Persist an entity and flush it.

        A transient entity without a primary key is added. A pending or
        persistent entity is kept as is. Anything else (a transient entity
        carrying an id, or a detached one) is merged, which loads the stored
        row and copies the entity's state onto it.

        Args:
            entity: Entity instance to persist

        Returns:
            The instance tracked by the session after the flush
        """
        state = inspect(entity)
        if state.pending or state.persistent:
            managed = entity
        elif state.transient and self._is_new(entity):
            self.session.add(entity)
            managed = entity
        else:
            managed = await self.session.merge(entity)
        await self.session.flush()
        return managed

    async def find_by_id(self, entity_id: Any) -> Optional[EntityType]:
        """Get entity by its primary key.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """
        return await self.session.get(self.model, entity_id)

    async def get_by_id(self, entity_id: Any) -> EntityType:
        """Get entity by its primary key or fail.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance

        Raises:
            EntityNotFoundError: If no row has this primary key
        """
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.model, entity_id)
        return entity

    async def find_all(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[EntityType]:
        """List entities ordered by primary key.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip

        Returns:
            List of entity instances
        """
        stmt = select(self.model).order_by(*inspect(self.model).primary_key)
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count all rows of the entity's table."""
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def exists_by_id(self, entity_id: Any) -> bool:
        return await self.find_by_id(entity_id) is not None

    async def delete(self, entity: EntityType) -> None:
        """Delete an entity and flush.

        Args:
            entity: Persistent entity instance to delete
        """
        await self.session.delete(entity)
        await self.session.flush()

    async def delete_by_id(self, entity_id: Any) -> bool:
        """Delete entity by its primary key.

        Args:
            entity_id: Primary key value

        Returns:
            True if deleted, False if not found
        """
        entity = await self.find_by_id(entity_id)
        if entity is None:
            return False
        await self.delete(entity)
        return True
