"""PostgreSQL block store adapter.

Implements BlockStorePort with two raw queries over SQLAlchemy async
(asyncpg driver). The adapter owns the mapping between Block fields and
table columns; no ORM metadata is involved.

Table shape:
    block_num    INTEGER PRIMARY KEY
    block_hash   BYTEA
    parent_hash  BYTEA

Lifecycle:
    async with PostgresBlockStore(config) as store:
        count, max_block = await store.count_and_max()

    The engine is created on entry and disposed on exit, including exit
    by exception.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from structlog import get_logger

from archive_audit.application.ports.block_store import BlockStorePort
from archive_audit.bootstrap.database import create_engine_for, create_session_factory
from archive_audit.domain.errors import BlockFetchError, StoreUnavailableError
from archive_audit.domain.models import Block

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

    from archive_audit.config import BlockStoreConfig

logger = get_logger()

# Block field -> table column
BLOCK_COLUMNS: dict[str, str] = {
    "block_num": "block_num",
    "block_hash": "block_hash",
    "parent_hash": "parent_hash",
}


def _to_bytes(value: Any) -> bytes:
    # asyncpg returns bytea as bytes; other drivers may hand back memoryview
    if isinstance(value, memoryview):
        return value.tobytes()
    return bytes(value)


class PostgresBlockStore(BlockStorePort):
    """Read-only PostgreSQL implementation of BlockStorePort.

    Every lookup opens its own session, so the paired lookups issued by
    the scanner run on separate pooled connections.

    Attributes:
        table_name: The table the blocks are read from.
    """

    def __init__(
        self,
        config: "BlockStoreConfig",
        engine: Optional["AsyncEngine"] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Block store configuration.
            engine: Optional pre-built engine (used by tests). When given,
                the adapter does not dispose it on close.
        """
        self._config = config
        self._engine = engine
        self._owns_engine = engine is None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = (
            create_session_factory(engine) if engine is not None else None
        )
        self._log = logger.bind(component="postgres_block_store", table=config.table_name)

        cols = BLOCK_COLUMNS
        self._stats_sql = text(
            f"SELECT COUNT(*) AS count, MAX({cols['block_num']}) AS max "
            f"FROM {config.table_name}"
        )
        self._lookup_sql = text(
            f"SELECT {cols['block_num']}, {cols['block_hash']}, {cols['parent_hash']} "
            f"FROM {config.table_name} "
            f"WHERE {cols['block_num']} = :block_num"
        )

    @property
    def table_name(self) -> str:
        return self._config.table_name

    async def connect(self) -> None:
        """Create the engine and session factory.

        Raises:
            InvalidConfigurationError: If no database URL is configured.
        """
        if self._session_factory is not None:
            return
        self._engine = create_engine_for(self._config)
        self._session_factory = create_session_factory(self._engine)
        self._log.info("block_store_connected")

    async def close(self) -> None:
        """Dispose the engine if this adapter created it."""
        if self._engine is not None and self._owns_engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._log.info("block_store_closed")

    async def __aenter__(self) -> PostgresBlockStore:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise StoreUnavailableError("Block store not connected")
        return self._session_factory

    async def count_and_max(self) -> tuple[int, int | None]:
        """Get the row count and highest block number.

        SQL Pattern:
            SELECT COUNT(*), MAX(block_num) FROM block

        Raises:
            StoreUnavailableError: If the connection or query fails.
        """
        session_factory = self._sessions()
        try:
            async with session_factory() as session:
                result = await session.execute(self._stats_sql)
                row = result.mappings().one()
        except (SQLAlchemyError, OSError) as e:
            self._log.error("block_store_statistics_failed", error=str(e))
            raise StoreUnavailableError(f"Block store unavailable: {e}") from e

        count = int(row["count"] or 0)
        max_block = int(row["max"]) if row["max"] is not None else None
        return (count, max_block)

    async def get_by_number(self, block_num: int) -> Block | None:
        """Get the block at a given number.

        SQL Pattern:
            SELECT block_num, block_hash, parent_hash FROM block WHERE block_num = $1

        Returns:
            The stored Block, or None if no row exists.

        Raises:
            BlockFetchError: If the lookup fails.
        """
        session_factory = self._sessions()
        try:
            async with session_factory() as session:
                result = await session.execute(
                    self._lookup_sql, {"block_num": block_num}
                )
                row = result.mappings().one_or_none()
        except (SQLAlchemyError, OSError) as e:
            self._log.error("block_fetch_failed", block_num=block_num, error=str(e))
            raise BlockFetchError(block_num, str(e)) from e

        if row is None:
            return None

        return Block(
            block_num=int(row[BLOCK_COLUMNS["block_num"]]),
            block_hash=_to_bytes(row[BLOCK_COLUMNS["block_hash"]]),
            parent_hash=_to_bytes(row[BLOCK_COLUMNS["parent_hash"]]),
        )
