"""Test configuration for database e2e tests.

The scenarios are rerun against a real PostgreSQL started with Testcontainers.
The whole directory is skipped unless DATABASE__ENABLE_POSTGRES_TESTS is set,
since it needs a Docker daemon.
"""

from __future__ import annotations

from test.settings import test_settings
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from testcontainers.postgres import PostgresContainer

from orm_pitfalls.core.database.utils import create_all, create_engine, create_sessionmaker, drop_all


def pytest_collection_modifyitems(config, items):
    if test_settings.database.enable_postgres_tests:
        return
    skip_postgres = pytest.mark.skip(reason="set DATABASE__ENABLE_POSTGRES_TESTS=true to run PostgreSQL tests")
    for item in items:
        if "postgres" in item.keywords:
            item.add_marker(skip_postgres)


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Start a PostgreSQL container for the test session."""
    postgres_config = test_settings.database.postgres
    container = PostgresContainer(
        postgres_config.image,
        username=postgres_config.user,
        password=postgres_config.password,
        dbname=postgres_config.db,
    )
    container.start()
    try:
        yield container
    finally:
        container.stop()


@pytest_asyncio.fixture
async def postgres_engine(postgres_container: PostgresContainer) -> AsyncGenerator[AsyncEngine, None]:
    """Create an asyncpg engine on the container with fresh tables."""
    engine = create_engine(postgres_container.get_connection_url())
    await create_all(engine)

    yield engine

    await drop_all(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_session(postgres_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(postgres_engine)() as session:
        yield session


@pytest_asyncio.fixture
async def postgres_client(postgres_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session on the container."""
    from orm_pitfalls.core.database import get_session
    from orm_pitfalls.server.main import app

    session_maker = create_sessionmaker(postgres_engine)

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()
