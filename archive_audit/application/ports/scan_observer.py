"""Scan observer port definition.

The continuity scanner never prints. It reports what it finds through
this observer so progress and diagnostics can be rendered (console, JSON)
or captured (tests) without touching the comparison logic.

Every hook is a no-op by default; observers override what they need.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from archive_audit.domain.models import (
        ContinuityBreak,
        MissingBlock,
        ScanRange,
        ScanResult,
    )


class ScanObserverPort:
    """Receives scan events from ContinuityScanService.

    Call order for one scan:
        on_scan_started -> (on_break | on_missing)* -> on_progress, repeated
        for each position -> on_scan_completed

    on_scan_completed is not called when the scan aborts on a store error.
    """

    def on_scan_started(self, scan_range: "ScanRange") -> None:
        """Called once after the range has been derived."""

    def on_break(self, brk: "ContinuityBreak") -> None:
        """Called for every continuity break as soon as it is found."""

    def on_missing(self, missing: "MissingBlock") -> None:
        """Called for every missing block when gaps are reported."""

    def on_progress(self, scanned: int, total: int) -> None:
        """Called after every position, whatever its outcome."""

    def on_scan_completed(self, result: "ScanResult") -> None:
        """Called once after the full range has been scanned."""
