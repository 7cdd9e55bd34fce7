"""Block store exceptions.

These exceptions are raised by block store implementations when the
archive cannot be read. Every one of them aborts a scan: there is no
retry policy for reads against settled history.
"""

from archive_audit.domain.exceptions import ArchiveAuditError


class BlockStoreError(ArchiveAuditError):
    """Base exception for block store failures."""

    pass


class StoreUnavailableError(BlockStoreError):
    """Raised when the block store cannot be reached.

    Covers connection setup failures and failures of the aggregate
    statistics query that starts every scan.
    """

    def __init__(self, message: str = "Block store unavailable") -> None:
        """Initialize with default message for an unreachable store."""
        super().__init__(message)


class BlockFetchError(BlockStoreError):
    """Raised when a single block lookup fails unexpectedly.

    An absent row is NOT a fetch failure; lookups return None for that.

    Attributes:
        block_num: The block number whose lookup failed.
    """

    def __init__(self, block_num: int, message: str = "") -> None:
        self.block_num = block_num
        detail = f"Failed to fetch Block #{block_num}"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(detail)


class InvalidConfigurationError(ArchiveAuditError):
    """Raised when the block store configuration is missing or invalid."""

    pass
