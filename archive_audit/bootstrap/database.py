"""Database engine bootstrap (PostgreSQL via SQLAlchemy).

This module builds the async engine and session factory for the block
store from an explicit BlockStoreConfig. There is no process-wide
singleton: the caller owns the engine and disposes it on shutdown.

Usage:
    from archive_audit.bootstrap.database import create_engine_for, create_session_factory

    engine = create_engine_for(config)
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        # Use session for database operations
    await engine.dispose()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

if TYPE_CHECKING:
    from archive_audit.config import BlockStoreConfig

logger = get_logger()


def mask_database_url(url: str) -> str:
    """Hide the password in a connection URL for logging.

    Args:
        url: Connection URL, possibly with credentials.

    Returns:
        The URL with the password replaced by ***.
    """
    if "@" not in url:
        return url
    before_at, after_at = url.rsplit("@", 1)
    scheme, sep, credentials = before_at.rpartition("//")
    if ":" not in credentials:
        return url
    user_part = credentials.split(":", 1)[0]
    return f"{scheme}{sep}{user_part}:***@{after_at}"


def create_engine_for(config: "BlockStoreConfig") -> AsyncEngine:
    """Create the SQLAlchemy async engine for a block store.

    Args:
        config: Block store configuration.

    Returns:
        An AsyncEngine using the asyncpg driver.

    Raises:
        InvalidConfigurationError: If no database URL is configured.
    """
    log = logger.bind(component="database_bootstrap")
    url = config.async_database_url

    log.info("creating_database_engine", url=mask_database_url(url))

    return create_async_engine(
        url,
        echo=config.echo,
        pool_pre_ping=True,  # Enable connection health checks
        connect_args={"command_timeout": config.query_timeout_seconds},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine.

    Sessions are read-only in practice; expire_on_commit is off because
    nothing is ever committed.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
