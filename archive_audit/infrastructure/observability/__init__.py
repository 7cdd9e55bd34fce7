"""Observability infrastructure for structured logging.

Usage:
    from archive_audit.infrastructure.observability import (
        bind_scan_id,
        configure_structlog,
    )

    # At startup
    configure_structlog(environment="production")
    bind_scan_id()
"""

from archive_audit.infrastructure.observability.logging import (
    bind_scan_id,
    configure_structlog,
)

__all__: list[str] = ["bind_scan_id", "configure_structlog"]
