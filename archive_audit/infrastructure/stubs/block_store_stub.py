"""Block store stub for testing and offline audits.

This stub implementation of BlockStorePort keeps blocks in memory and
allows controlled simulation of archive anomalies and store failures.

Usage:
    >>> stub = BlockStoreStub.linear_chain(start=100, count=5)
    >>> stub.set_parent_hash(103, b"\\xff" * 32)
    >>> count, max_block = await stub.count_and_max()
    >>> assert (count, max_block) == (5, 104)
"""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Iterable
from typing import Any, Optional

from archive_audit.application.ports.block_store import BlockStorePort
from archive_audit.domain.errors import BlockFetchError, StoreUnavailableError
from archive_audit.domain.models import Block


def _parse_hash(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    if not isinstance(value, str):
        raise TypeError(f"hash must be a hex string, got {type(value).__name__}")
    return bytes.fromhex(value[2:] if value.startswith(("0x", "0X")) else value)


def synthetic_hash(block_num: int, salt: str = "") -> bytes:
    """Deterministic 32-byte hash for a block number."""
    return hashlib.sha256(f"{salt}block-{block_num}".encode()).digest()


class BlockStoreStub(BlockStorePort):
    """In-memory implementation of BlockStorePort.

    Attributes:
        fetch_log: Block numbers requested through get_by_number, in order.
        max_in_flight: Highest number of lookups observed running at once.

    Example:
        >>> stub = BlockStoreStub()
        >>> stub.add_block(Block(1, b"\\x01", b"\\x00"))
        >>> stub.simulate_fetch_failure(1)
        >>> await stub.get_by_number(1)  # raises BlockFetchError
    """

    def __init__(
        self,
        blocks: Optional[Iterable[Block]] = None,
        fetch_delay: float = 0.0,
    ) -> None:
        """Initialize the stub.

        Args:
            blocks: Initial blocks.
            fetch_delay: Seconds each lookup sleeps, to exercise concurrency.
        """
        self._blocks: dict[int, Block] = {}
        self._fetch_delay = fetch_delay
        self._unavailable = False
        self._failing: set[int] = set()
        self._in_flight = 0
        self.fetch_log: list[int] = []
        self.max_in_flight = 0
        for block in blocks or ():
            self.add_block(block)

    @classmethod
    def linear_chain(
        cls, start: int, count: int, fetch_delay: float = 0.0
    ) -> BlockStoreStub:
        """Create a consistent chain of `count` blocks starting at `start`."""
        blocks = [
            Block(
                block_num=n,
                block_hash=synthetic_hash(n),
                parent_hash=synthetic_hash(n - 1),
            )
            for n in range(start, start + count)
        ]
        return cls(blocks, fetch_delay=fetch_delay)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> BlockStoreStub:
        """Create a stub from exported rows.

        Each record needs block_num, block_hash and parent_hash. Hashes may
        be hex strings with or without a 0x prefix.

        Raises:
            KeyError: If a record lacks a required field.
            TypeError: If a hash is not a string.
            ValueError: If a hash is not valid hex.
        """
        return cls(
            Block(
                block_num=int(r["block_num"]),
                block_hash=_parse_hash(r["block_hash"]),
                parent_hash=_parse_hash(r["parent_hash"]),
            )
            for r in records
        )

    async def count_and_max(self) -> tuple[int, int | None]:
        """Get row count and highest block number.

        Raises:
            StoreUnavailableError: If unavailability is simulated.
        """
        if self._unavailable:
            raise StoreUnavailableError("Simulated block store outage")
        return (len(self._blocks), max(self._blocks, default=None))

    async def get_by_number(self, block_num: int) -> Block | None:
        """Get the block at a number, or None if absent.

        Raises:
            BlockFetchError: If a failure is simulated for this number.
        """
        self.fetch_log.append(block_num)
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self._fetch_delay:
                await asyncio.sleep(self._fetch_delay)
            if block_num in self._failing:
                raise BlockFetchError(block_num, "simulated fetch failure")
            return self._blocks.get(block_num)
        finally:
            self._in_flight -= 1

    def add_block(self, block: Block) -> None:
        """Store a block, replacing any block at the same number."""
        self._blocks[block.block_num] = block

    def remove_block(self, block_num: int) -> None:
        """Delete a block to simulate a hole in the archive."""
        self._blocks.pop(block_num, None)

    def set_parent_hash(self, block_num: int, parent_hash: bytes) -> None:
        """Overwrite a block's parent hash to inject a continuity break.

        Raises:
            KeyError: If no block is stored at block_num.
        """
        block = self._blocks[block_num]
        self._blocks[block_num] = Block(
            block_num=block.block_num,
            block_hash=block.block_hash,
            parent_hash=parent_hash,
        )

    def simulate_unavailable(self, unavailable: bool = True) -> None:
        """Make count_and_max() raise StoreUnavailableError."""
        self._unavailable = unavailable

    def simulate_fetch_failure(self, block_num: int) -> None:
        """Make lookups of block_num raise BlockFetchError."""
        self._failing.add(block_num)

    def clear(self) -> None:
        """Clear all state (blocks, failures, fetch log)."""
        self._blocks.clear()
        self._failing.clear()
        self._unavailable = False
        self.fetch_log.clear()
        self.max_in_flight = 0

    @property
    def block_count(self) -> int:
        return len(self._blocks)
