"""Application services."""

from archive_audit.application.services.continuity_scan_service import (
    ContinuityScanService,
)

__all__: list[str] = ["ContinuityScanService"]
