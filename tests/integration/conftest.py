"""
Integration test configuration with testcontainers.

Provides a session-scoped PostgreSQL container and a function-scoped
engine with a freshly created block table.

Note: Docker must be running for these fixtures to work. Tests are
skipped when testcontainers or Docker is unavailable.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

testcontainers_postgres = pytest.importorskip("testcontainers.postgres")

BLOCK_TABLE_DDL = """
CREATE TABLE block (
    block_num INTEGER PRIMARY KEY,
    block_hash BYTEA NOT NULL,
    parent_hash BYTEA NOT NULL
)
"""


@pytest.fixture(scope="session")
def postgres_container() -> Generator[Any, None, None]:
    """Session-scoped PostgreSQL 16 container."""
    try:
        container = testcontainers_postgres.PostgresContainer(
            "postgres:16-alpine", driver="asyncpg"
        )
        container.start()
    except Exception as e:  # Docker not running
        pytest.skip(f"PostgreSQL container unavailable: {e}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
def database_url(postgres_container: Any) -> str:
    """asyncpg URL for the container."""
    return postgres_container.get_connection_url()


@pytest.fixture
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Engine with an empty block table, dropped after the test."""
    engine = create_async_engine(database_url)
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS block"))
        await conn.execute(text(BLOCK_TABLE_DDL))
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.execute(text("DROP TABLE IF EXISTS block"))
        await engine.dispose()
