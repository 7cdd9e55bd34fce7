"""Console scan reporter.

Renders a scan as plain diagnostic lines on a rich Console:

    Block #100 ~ Block #104: Count(5)
    Block #103, parentHash 0x...
    ParentBlock #102, blockHash 0x...
    (4 / 4)

The progress line ends with a carriage return so each update overwrites
the previous one on a terminal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from archive_audit.application.ports.scan_observer import ScanObserverPort

if TYPE_CHECKING:
    from archive_audit.domain.models import (
        ContinuityBreak,
        MissingBlock,
        ScanRange,
        ScanResult,
    )


def format_range(scan_range: "ScanRange") -> str:
    if scan_range.is_empty:
        return "Block store is empty: Count(0)"
    return (
        f"Block #{scan_range.min_block} ~ Block #{scan_range.max_block}: "
        f"Count({scan_range.count})"
    )


def format_break(brk: "ContinuityBreak") -> list[str]:
    data = brk.to_dict()
    return [
        f"Block #{brk.child_num}, parentHash {data['child_parent_hash']}",
        f"ParentBlock #{brk.parent_num}, blockHash {data['parent_block_hash']}",
    ]


def format_missing(missing: "MissingBlock") -> str:
    return (
        f"Block #{missing.block_num} missing "
        f"(required to check Block #{missing.checked_for})"
    )


def format_progress(scanned: int, total: int) -> str:
    return f"({scanned} / {total})"


class ConsoleScanReporter(ScanObserverPort):
    """ScanObserverPort that prints to a rich Console.

    Args:
        console: Where to print (default: a stdout Console).
        show_progress: Whether to print the overwritten progress line.
    """

    def __init__(self, console: Console | None = None, show_progress: bool = True) -> None:
        self._console = console or Console()
        self._show_progress = show_progress
        self._progress_pending = False

    def _line(self, text: str) -> None:
        # Starts at column 0, so it overwrites a pending progress line
        self._progress_pending = False
        self._console.print(text, markup=False, highlight=False, soft_wrap=True)

    def on_scan_started(self, scan_range: "ScanRange") -> None:
        self._line(format_range(scan_range))

    def on_break(self, brk: "ContinuityBreak") -> None:
        for text in format_break(brk):
            self._line(text)

    def on_missing(self, missing: "MissingBlock") -> None:
        self._line(format_missing(missing))

    def on_progress(self, scanned: int, total: int) -> None:
        if not self._show_progress:
            return
        self._console.print(
            format_progress(scanned, total),
            end="\r",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        self._progress_pending = True

    def on_scan_completed(self, result: "ScanResult") -> None:
        if self._progress_pending:
            self._console.print()
            self._progress_pending = False
