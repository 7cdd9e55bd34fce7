"""Continuity scan service.

This service walks the stored block range from newest to oldest and
checks that every block's parent hash matches the hash stored for the
preceding block number.

Scan model:
- One statistics query derives the range: min = max - count + 1.
- Positions run from max down to min + 1, one at a time.
- The child and parent lookups for a position run concurrently and are
  awaited together before comparison. At most two blocks are in flight.

Findings:
- A mismatching parent hash is a ContinuityBreak.
- An absent child or parent is a MissingBlock under GapPolicy.REPORT and
  is passed over under GapPolicy.SKIP. It is never a break. Each absent
  number is reported once even though two positions need it.

Failure:
    Any store error aborts the remaining scan and propagates to the
    caller. Findings already reported to the observer stay valid.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

import structlog

from archive_audit.application.ports.scan_observer import ScanObserverPort
from archive_audit.domain.errors import BlockStoreError
from archive_audit.domain.models import (
    ContinuityBreak,
    GapPolicy,
    LinkCheck,
    MissingBlock,
    ScanRange,
    ScanResult,
)

if TYPE_CHECKING:
    from archive_audit.application.ports.block_store import BlockStorePort
    from archive_audit.domain.models import Block


def check_link(
    position: int,
    block: Optional[Block],
    parent: Optional[Block],
) -> LinkCheck:
    """Compare a child block with the block stored one number below it.

    Args:
        position: The child block number.
        block: The block stored at position, if any.
        parent: The block stored at position - 1, if any.

    Returns:
        LinkCheck with a break when both blocks exist and the parent hash
        differs, or with the missing side(s) when either is absent.
    """
    if block is None or parent is None:
        missing = []
        if block is None:
            missing.append(MissingBlock(block_num=position, checked_for=position))
        if parent is None:
            missing.append(MissingBlock(block_num=position - 1, checked_for=position))
        return LinkCheck(position=position, missing=tuple(missing))

    if block.links_to(parent):
        return LinkCheck(position=position)

    return LinkCheck(
        position=position,
        brk=ContinuityBreak(
            child_num=block.block_num,
            child_parent_hash=block.parent_hash,
            parent_num=parent.block_num,
            parent_block_hash=parent.block_hash,
        ),
    )


class ContinuityScanService:
    """Continuity scan service.

    Audits the archive for rollbacks, forks and corruption by checking the
    parent hash link of every block in the derived range. Read-only.

    Attributes:
        gap_policy: How absent blocks inside the range are handled.
        service_id: The service identifier for logging.

    Example:
        >>> service = ContinuityScanService(
        ...     block_store=block_store,
        ...     observer=ConsoleScanReporter(console),
        ... )
        >>> result = await service.scan()
        >>> if not result.is_continuous:
        ...     ...
    """

    def __init__(
        self,
        block_store: "BlockStorePort",
        observer: Optional[ScanObserverPort] = None,
        gap_policy: GapPolicy = GapPolicy.REPORT,
    ) -> None:
        """Initialize the continuity scan service.

        Args:
            block_store: The block store port to read from.
            observer: Optional observer for progress and findings.
            gap_policy: Whether missing blocks are reported or skipped.
        """
        self._store = block_store
        self._observer = observer or ScanObserverPort()
        self._gap_policy = gap_policy
        self._service_id = "continuity_scanner"
        self._log = structlog.get_logger().bind(service=self._service_id)

    @property
    def gap_policy(self) -> GapPolicy:
        return self._gap_policy

    @property
    def service_id(self) -> str:
        return self._service_id

    async def derive_range(self) -> ScanRange:
        """Query the store statistics and derive the scan range.

        Raises:
            StoreUnavailableError: If the statistics query fails.
        """
        count, max_block = await self._store.count_and_max()
        return ScanRange.from_statistics(count, max_block)

    async def scan(self) -> ScanResult:
        """Scan the whole derived range.

        Returns:
            ScanResult with every break and missing block found.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
            BlockFetchError: If a lookup fails mid-scan.
        """
        scan_range = await self.derive_range()
        result = ScanResult(scan_range=scan_range)

        self._log.info(
            "continuity_scan_started",
            min_block=scan_range.min_block,
            max_block=scan_range.max_block,
            count=scan_range.count,
            gap_policy=self._gap_policy.value,
        )
        self._observer.on_scan_started(scan_range)

        total = scan_range.positions
        try:
            for position in scan_range.iter_positions():
                check = await self.check_position(position)
                self._record(check, result)
                result.positions_scanned += 1
                self._observer.on_progress(result.positions_scanned, total)
        except BlockStoreError as e:
            self._log.error(
                "continuity_scan_aborted",
                error=str(e),
                positions_scanned=result.positions_scanned,
                breaks=len(result.breaks),
            )
            raise

        self._log.info(
            "continuity_scan_completed",
            positions_scanned=result.positions_scanned,
            breaks=len(result.breaks),
            missing=len(result.missing),
        )
        self._observer.on_scan_completed(result)
        return result

    async def check_position(self, position: int) -> LinkCheck:
        """Fetch a child and its parent together and compare them.

        Args:
            position: The child block number.

        Raises:
            BlockFetchError: If either lookup fails.
        """
        block, parent = await asyncio.gather(
            self._store.get_by_number(position),
            self._store.get_by_number(position - 1),
        )
        return check_link(position, block, parent)

    def _record(self, check: LinkCheck, result: ScanResult) -> None:
        if check.brk is not None:
            brk = check.brk
            self._log.warning("continuity_break_detected", **brk.to_dict())
            result.breaks.append(brk)
            self._observer.on_break(brk)
            return

        if self._gap_policy is GapPolicy.SKIP:
            return

        for missing in check.missing:
            # An absent block is seen twice: as parent at n+1, then as child at n.
            if result.missing and result.missing[-1].block_num == missing.block_num:
                continue
            self._log.warning(
                "missing_block_detected",
                block_num=missing.block_num,
                checked_for=missing.checked_for,
            )
            result.missing.append(missing)
            self._observer.on_missing(missing)
