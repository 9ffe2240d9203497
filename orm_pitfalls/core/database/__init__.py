"""
Database layer for the ORM pitfalls reproducer.

Structure:
- base.py: Declarative bases and the write-once attribute mixin
- entities/: Entity models, grouped per pitfall
- repositories/: Generic async CRUD repository
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session, DDL, repo bundle)
"""

from .base import Base, DataclassBase, ReadOnlyFieldsMixin, shared_metadata
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    RepositoryBundle,
    build_repositories,
    create_all,
    create_engine,
    create_sessionmaker,
    drop_all,
)

__all__ = [
    "Base",
    "DataclassBase",
    "ReadOnlyFieldsMixin",
    "RepositoryBundle",
    "async_session_maker",
    "build_repositories",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "drop_all",
    "engine",
    "get_session",
    "init_db",
    "shared_metadata",
]
