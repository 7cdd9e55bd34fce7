"""Continuity scan models: range, diagnostics and results.

A scan compares every block in the derived range with the block stored at
the preceding number. Two kinds of finding come out of it:

- ContinuityBreak: both blocks exist but the parent hash does not match.
- MissingBlock: one side of the pair has no stored row.

Neither finding is an error in the tool itself. They are what the audit
is looking for.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from archive_audit.domain.models.block import to_hex


class GapPolicy(str, Enum):
    """What to do when one side of a compared pair is absent.

    REPORT surfaces every absent block as a MissingBlock diagnostic.
    SKIP passes over the position silently.
    """

    REPORT = "report"
    SKIP = "skip"


@dataclass(frozen=True)
class ScanRange:
    """Range of block numbers derived from the store's statistics.

    The range assumes the archive is a contiguous window of exactly
    `count` rows ending at `max_block`. That assumption is not verified;
    holes inside the window show up as MissingBlock diagnostics.

    Attributes:
        count: Number of stored rows.
        max_block: Highest stored block number (None for an empty store).
    """

    count: int
    max_block: int | None

    @classmethod
    def from_statistics(cls, count: int, max_block: int | None) -> ScanRange:
        if max_block is None or count <= 0:
            return cls(count=0, max_block=None)
        return cls(count=count, max_block=max_block)

    @property
    def is_empty(self) -> bool:
        return self.max_block is None

    @property
    def min_block(self) -> int | None:
        if self.max_block is None:
            return None
        return self.max_block - self.count + 1

    @property
    def positions(self) -> int:
        """Number of comparisons the scan performs."""
        if self.max_block is None:
            return 0
        return max(self.count - 1, 0)

    def iter_positions(self) -> Iterator[int]:
        """Yield child block numbers from max_block down to min_block + 1."""
        if self.max_block is None or self.min_block is None:
            return
        yield from range(self.max_block, self.min_block, -1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_block": self.min_block,
            "max_block": self.max_block,
            "count": self.count,
            "positions": self.positions,
        }


@dataclass(frozen=True, eq=True)
class ContinuityBreak:
    """A position where the parent hash link is broken.

    Attributes:
        child_num: Block number whose parent hash was checked.
        child_parent_hash: Parent hash declared by the child block.
        parent_num: Preceding block number (child_num - 1).
        parent_block_hash: Hash stored for the preceding block.
    """

    child_num: int
    child_parent_hash: bytes
    parent_num: int
    parent_block_hash: bytes

    def to_dict(self) -> dict[str, Any]:
        return {
            "child_num": self.child_num,
            "child_parent_hash": to_hex(self.child_parent_hash),
            "parent_num": self.parent_num,
            "parent_block_hash": to_hex(self.parent_block_hash),
        }


@dataclass(frozen=True, eq=True)
class MissingBlock:
    """A block number inside the scan range with no stored row.

    Attributes:
        block_num: The absent block number.
        checked_for: The child position whose comparison needed it.
    """

    block_num: int
    checked_for: int

    def to_dict(self) -> dict[str, Any]:
        return {"block_num": self.block_num, "checked_for": self.checked_for}


@dataclass(frozen=True)
class LinkCheck:
    """Outcome of comparing one child/parent pair."""

    position: int
    brk: ContinuityBreak | None = None
    missing: tuple[MissingBlock, ...] = ()

    @property
    def is_linked(self) -> bool:
        return self.brk is None and not self.missing


@dataclass
class ScanResult:
    """Everything a completed scan found.

    Attributes:
        scan_range: The range that was scanned.
        breaks: Continuity breaks in the order they were found (newest first).
        missing: Missing blocks in the order they were found.
        positions_scanned: Number of positions processed.
    """

    scan_range: ScanRange
    breaks: list[ContinuityBreak] = field(default_factory=list)
    missing: list[MissingBlock] = field(default_factory=list)
    positions_scanned: int = 0

    @property
    def is_continuous(self) -> bool:
        return not self.breaks and not self.missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "range": self.scan_range.to_dict(),
            "positions_scanned": self.positions_scanned,
            "is_continuous": self.is_continuous,
            "breaks": [b.to_dict() for b in self.breaks],
            "missing": [m.to_dict() for m in self.missing],
        }
