"""
Database utility functions for engine and session management.

This module provides the core utility functions for creating database engines,
session factories, and repository bundles.

Functions:
- create_engine: Creates async SQLAlchemy engine with URL normalization
- create_sessionmaker: Creates async session factory with safe defaults
- create_all / drop_all: DDL for every entity table (declarative and SQLModel)
- build_repositories: Builds the repository bundle for one session
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from .base import shared_metadata
from .entities.data_classes import (
    DGadget,
    DOrder,
    DOrderItem,
    DUser,
    EmployeeDataClass,
    PersonDataClassProblem,
    PersonSolution,
    SGadget,
    SUser,
    UserDataEntity,
    UserEntity,
)
from .entities.immutable_collections import (
    CompanyFrozenCollection,
    CompanyMutableSolution,
    CompanyReadOnlyProblem,
    EmployeeFrozen,
    EmployeeProblem,
    EmployeeSolution,
)
from .entities.model_classes import PersonModelProblem
from .entities.read_only_fields import PersonReadOnlyProblem, PersonWritableSolution
from .repositories.base import AsyncCrudRepository

ALL_METADATA = (shared_metadata, SQLModel.metadata)


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    The helper normalizes Postgres URLs to ensure the async driver is used.
    For example, it rewrites ``postgresql://`` and other variants to
    ``postgresql+asyncpg://``.

    Args:
        db_url: Database connection URL
        echo: Log every SQL statement

    Returns:
        Configured AsyncEngine instance
    """
    url = re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", db_url, count=1)
    kwargs: dict[str, Any] = {"echo": echo}
    if make_url(url).get_backend_name() != "sqlite":
        kwargs["pool_pre_ping"] = True
    return create_async_engine(url, **kwargs)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` with safe defaults for this project.

    Objects stay loaded after commit so a scenario can still report on them.

    Args:
        engine: Async SQLAlchemy engine

    Returns:
        Configured async session factory
    """
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all entity tables.

    Args:
        engine: Async SQLAlchemy engine
    """
    async with engine.begin() as conn:
        for metadata in ALL_METADATA:
            await conn.run_sync(metadata.create_all)


async def drop_all(engine: AsyncEngine) -> None:
    """Drop all entity tables.

    Args:
        engine: Async SQLAlchemy engine
    """
    async with engine.begin() as conn:
        for metadata in reversed(ALL_METADATA):
            await conn.run_sync(metadata.drop_all)


@dataclass(frozen=True)
class RepositoryBundle:
    """Convenience bundle of all repositories for dependency injection."""

    person_read_only: AsyncCrudRepository[PersonReadOnlyProblem]
    person_writable: AsyncCrudRepository[PersonWritableSolution]
    company_read_only: AsyncCrudRepository[CompanyReadOnlyProblem]
    employee_problem: AsyncCrudRepository[EmployeeProblem]
    company_mutable: AsyncCrudRepository[CompanyMutableSolution]
    employee_solution: AsyncCrudRepository[EmployeeSolution]
    company_frozen: AsyncCrudRepository[CompanyFrozenCollection]
    employee_frozen: AsyncCrudRepository[EmployeeFrozen]
    person_data_class: AsyncCrudRepository[PersonDataClassProblem]
    employee_data_class: AsyncCrudRepository[EmployeeDataClass]
    user_data: AsyncCrudRepository[UserDataEntity]
    d_users: AsyncCrudRepository[DUser]
    d_gadgets: AsyncCrudRepository[DGadget]
    d_orders: AsyncCrudRepository[DOrder]
    d_order_items: AsyncCrudRepository[DOrderItem]
    person_solution: AsyncCrudRepository[PersonSolution]
    users: AsyncCrudRepository[UserEntity]
    s_users: AsyncCrudRepository[SUser]
    s_gadgets: AsyncCrudRepository[SGadget]
    person_model: AsyncCrudRepository[PersonModelProblem]


def build_repositories(session: AsyncSession) -> RepositoryBundle:
    """Build a ``RepositoryBundle`` sharing one session.

    Args:
        session: Async session every repository works in

    Returns:
        Bundle containing all repository instances
    """
    return RepositoryBundle(
        person_read_only=AsyncCrudRepository(session, PersonReadOnlyProblem),
        person_writable=AsyncCrudRepository(session, PersonWritableSolution),
        company_read_only=AsyncCrudRepository(session, CompanyReadOnlyProblem),
        employee_problem=AsyncCrudRepository(session, EmployeeProblem),
        company_mutable=AsyncCrudRepository(session, CompanyMutableSolution),
        employee_solution=AsyncCrudRepository(session, EmployeeSolution),
        company_frozen=AsyncCrudRepository(session, CompanyFrozenCollection),
        employee_frozen=AsyncCrudRepository(session, EmployeeFrozen),
        person_data_class=AsyncCrudRepository(session, PersonDataClassProblem),
        employee_data_class=AsyncCrudRepository(session, EmployeeDataClass),
        user_data=AsyncCrudRepository(session, UserDataEntity),
        d_users=AsyncCrudRepository(session, DUser),
        d_gadgets=AsyncCrudRepository(session, DGadget),
        d_orders=AsyncCrudRepository(session, DOrder),
        d_order_items=AsyncCrudRepository(session, DOrderItem),
        person_solution=AsyncCrudRepository(session, PersonSolution),
        users=AsyncCrudRepository(session, UserEntity),
        s_users=AsyncCrudRepository(session, SUser),
        s_gadgets=AsyncCrudRepository(session, SGadget),
        person_model=AsyncCrudRepository(session, PersonModelProblem),
    )
