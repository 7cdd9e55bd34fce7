"""Block store port definition.

Defines the narrow read-only contract the continuity scanner needs from
the archive. Infrastructure adapters must implement this protocol.

Consistency:
- Each lookup is independently consistent (read-committed is enough).
- The archive may be appended to while a scan runs. Stale reads of the
  chain tip are acceptable because the scan targets settled history.

Exceptions:
- StoreUnavailableError: connection or statistics query failure.
- BlockFetchError: a single lookup failed for a reason other than absence.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from archive_audit.domain.errors import (  # noqa: F401
        BlockFetchError,
        StoreUnavailableError,
    )
    from archive_audit.domain.models import Block


class BlockStorePort(ABC):
    """Abstract protocol for read-only block store access.

    All block store implementations must implement this interface.
    There are NO write methods: the auditor never mutates the archive.

    Note:
        Implementations must allow two get_by_number() calls to run
        concurrently; the scanner fetches each child/parent pair together.

    Example:
        >>> class MyBlockStore(BlockStorePort):
        ...     async def count_and_max(self) -> tuple[int, int | None]:
        ...         return (len(self._rows), max(self._rows, default=None))
        ...
        ...     async def get_by_number(self, block_num: int) -> Block | None:
        ...         return self._rows.get(block_num)
    """

    @abstractmethod
    async def count_and_max(self) -> "tuple[int, int | None]":
        """Get aggregate statistics for the stored blocks.

        Returns:
            Tuple of (row count, highest block number). The highest block
            number is None when the store is empty.

        Raises:
            StoreUnavailableError: If the store cannot be queried.
        """
        ...

    @abstractmethod
    async def get_by_number(self, block_num: int) -> "Block | None":
        """Get the block stored at a given number.

        Args:
            block_num: The block number to look up.

        Returns:
            The stored block, or None if no row exists at that number.
            Gaps are representable and are not errors.

        Raises:
            BlockFetchError: If the lookup fails unexpectedly.
        """
        ...
