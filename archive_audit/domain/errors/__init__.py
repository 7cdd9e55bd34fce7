"""Domain errors for archive audit.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from ArchiveAuditError.
"""

from archive_audit.domain.errors.block_store import (
    BlockFetchError,
    BlockStoreError,
    InvalidConfigurationError,
    StoreUnavailableError,
)

__all__: list[str] = [
    "BlockFetchError",
    "BlockStoreError",
    "InvalidConfigurationError",
    "StoreUnavailableError",
]
