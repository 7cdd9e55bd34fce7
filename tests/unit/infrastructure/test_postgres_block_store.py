"""Unit tests for PostgresBlockStore.

Uses a mocked session factory; the real database round trip is covered
by tests/integration/test_postgres_block_store_integration.py.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from archive_audit.config import BlockStoreConfig
from archive_audit.domain.errors import (
    BlockFetchError,
    InvalidConfigurationError,
    StoreUnavailableError,
)
from archive_audit.domain.models import Block
from archive_audit.infrastructure.adapters.persistence import (
    BLOCK_COLUMNS,
    PostgresBlockStore,
)


def _session_factory(session: AsyncMock) -> MagicMock:
    context = MagicMock()
    context.__aenter__.return_value = session
    context.__aexit__.return_value = False
    return MagicMock(return_value=context)


def _store_with(session: AsyncMock, table: str = "block") -> PostgresBlockStore:
    store = PostgresBlockStore(
        BlockStoreConfig(database_url="postgresql://u:p@h/db", table_name=table)
    )
    store._session_factory = _session_factory(session)
    return store


def _result(row: object) -> MagicMock:
    result = MagicMock()
    result.mappings.return_value.one.return_value = row
    result.mappings.return_value.one_or_none.return_value = row
    return result


class TestColumnMapping:
    """Tests for the explicit field/column mapping."""

    def test_block_columns_cover_block_fields(self) -> None:
        assert set(BLOCK_COLUMNS) == {"block_num", "block_hash", "parent_hash"}

    @pytest.mark.asyncio
    async def test_queries_use_configured_table(self) -> None:
        session = AsyncMock()
        session.execute.return_value = _result({"count": 0, "max": None})
        store = _store_with(session, table="archive.block")

        await store.count_and_max()

        sql = str(session.execute.await_args.args[0])
        assert "FROM archive.block" in sql
        assert "MAX(block_num)" in sql


class TestCountAndMax:
    """Tests for statistics queries."""

    @pytest.mark.asyncio
    async def test_returns_count_and_max(self) -> None:
        session = AsyncMock()
        session.execute.return_value = _result({"count": 5, "max": 104})
        assert await _store_with(session).count_and_max() == (5, 104)

    @pytest.mark.asyncio
    async def test_empty_table(self) -> None:
        session = AsyncMock()
        session.execute.return_value = _result({"count": 0, "max": None})
        assert await _store_with(session).count_and_max() == (0, None)

    @pytest.mark.asyncio
    async def test_database_error_is_store_unavailable(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )
        with pytest.raises(StoreUnavailableError, match="connection refused"):
            await _store_with(session).count_and_max()

    @pytest.mark.asyncio
    async def test_os_error_is_store_unavailable(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = ConnectionRefusedError("refused")
        with pytest.raises(StoreUnavailableError):
            await _store_with(session).count_and_max()

    @pytest.mark.asyncio
    async def test_not_connected_raises(self) -> None:
        store = PostgresBlockStore(BlockStoreConfig(database_url="postgresql://h/db"))
        with pytest.raises(StoreUnavailableError, match="not connected"):
            await store.count_and_max()


class TestGetByNumber:
    """Tests for single block lookups."""

    @pytest.mark.asyncio
    async def test_returns_block(self) -> None:
        session = AsyncMock()
        session.execute.return_value = _result(
            {"block_num": 7, "block_hash": b"\x07", "parent_hash": memoryview(b"\x06")}
        )

        block = await _store_with(session).get_by_number(7)

        assert block == Block(block_num=7, block_hash=b"\x07", parent_hash=b"\x06")
        assert isinstance(block.parent_hash, bytes)
        assert session.execute.await_args.args[1] == {"block_num": 7}

    @pytest.mark.asyncio
    async def test_absent_row_returns_none(self) -> None:
        session = AsyncMock()
        session.execute.return_value = _result(None)
        assert await _store_with(session).get_by_number(7) is None

    @pytest.mark.asyncio
    async def test_database_error_is_fetch_error(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("boom"))
        with pytest.raises(BlockFetchError) as exc_info:
            await _store_with(session).get_by_number(42)
        assert exc_info.value.block_num == 42


class TestLifecycle:
    """Tests for connect/close."""

    @pytest.mark.asyncio
    async def test_connect_without_url_raises(self) -> None:
        store = PostgresBlockStore(BlockStoreConfig())
        with pytest.raises(InvalidConfigurationError):
            await store.connect()

    @pytest.mark.asyncio
    async def test_context_manager_creates_and_disposes_engine(self) -> None:
        store = PostgresBlockStore(
            BlockStoreConfig(database_url="postgresql://u:p@localhost:1/db")
        )
        async with store:
            assert store._engine is not None
            assert store._session_factory is not None
        assert store._engine is None
        assert store._session_factory is None

    @pytest.mark.asyncio
    async def test_external_engine_is_not_disposed(self) -> None:
        engine = MagicMock()
        engine.dispose = AsyncMock()
        store = PostgresBlockStore(BlockStoreConfig(), engine=engine)
        await store.close()
        engine.dispose.assert_not_awaited()
