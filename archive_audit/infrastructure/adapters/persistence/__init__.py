"""Persistence adapters."""

from archive_audit.infrastructure.adapters.persistence.postgres_block_store import (
    BLOCK_COLUMNS,
    PostgresBlockStore,
)

__all__: list[str] = ["BLOCK_COLUMNS", "PostgresBlockStore"]
