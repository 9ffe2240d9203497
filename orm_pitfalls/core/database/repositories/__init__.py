"""
Repository layer.

One generic async repository class serves every entity; instances are bundled
per session by ``orm_pitfalls.core.database.utils.build_repositories``.
"""

from .base import AsyncCrudRepository, EntityNotFoundError, EntityType

__all__ = [
    "AsyncCrudRepository",
    "EntityNotFoundError",
    "EntityType",
]
