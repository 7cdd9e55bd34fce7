"""Domain models for blocks and continuity diagnostics."""

from archive_audit.domain.models.block import Block, to_hex
from archive_audit.domain.models.continuity import (
    ContinuityBreak,
    GapPolicy,
    LinkCheck,
    MissingBlock,
    ScanRange,
    ScanResult,
)

__all__: list[str] = [
    "Block",
    "ContinuityBreak",
    "GapPolicy",
    "LinkCheck",
    "MissingBlock",
    "ScanRange",
    "ScanResult",
    "to_hex",
]
