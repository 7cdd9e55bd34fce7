"""Block domain model.

One stored row per chain position. Hashes are opaque byte strings and are
compared byte for byte; the hex form exists only for display.
"""

from __future__ import annotations

from dataclasses import dataclass


def to_hex(value: bytes) -> str:
    """Render a binary hash as a lowercase hex string prefixed with 0x."""
    return f"0x{bytes(value).hex()}"


@dataclass(frozen=True, eq=True)
class Block:
    """A block as stored in the archive.

    Attributes:
        block_num: Position in the chain (primary key, unique).
        block_hash: Canonical hash of this block.
        parent_hash: Hash this block claims for its predecessor.
    """

    block_num: int
    block_hash: bytes
    parent_hash: bytes

    def links_to(self, parent: Block) -> bool:
        """Check whether this block's parent hash matches parent's hash."""
        return self.parent_hash == parent.block_hash
