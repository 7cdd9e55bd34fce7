"""Console rendering of scan progress and findings."""

from archive_audit.infrastructure.console.scan_reporter import (
    ConsoleScanReporter,
    format_break,
    format_missing,
    format_progress,
    format_range,
)

__all__: list[str] = [
    "ConsoleScanReporter",
    "format_break",
    "format_missing",
    "format_progress",
    "format_range",
]
