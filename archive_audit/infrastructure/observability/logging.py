"""Structured logging configuration with structlog.

This module provides centralized structlog configuration, supporting both
production (JSON) and development (console) output modes.

Logs go to stderr. Stdout carries the audit report itself, and the two
must never interleave.

Log Entry Format (production):
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "warning",
        "event": "continuity_break_detected",
        "scan_id": "uuid",
        "service": "continuity_scanner",
        ...additional context
    }

Usage:
    # At application startup
    from archive_audit.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")  # JSON output
    configure_structlog(environment="development")  # Console output
"""

import logging
import os
import sys
from typing import TextIO
from uuid import uuid4

import structlog
from structlog.typing import Processor

# Environment variable for log level (default: WARNING)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level(level_name: str | None = None) -> int:
    """Get the configured log level.

    Args:
        level_name: Explicit level name; falls back to LOG_LEVEL env var.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    name = (level_name or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    return getattr(logging, name, logging.WARNING)


def configure_structlog(
    environment: str = "production",
    level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the application.

    Should be called once at startup.

    Args:
        environment: 'production' for JSON output, 'development' for console.
        level: Log level name overriding LOG_LEVEL.
        stream: Output stream (default: stderr).
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def bind_scan_id(scan_id: str | None = None) -> str:
    """Tag every log entry of the current context with a scan ID.

    The ID lives in structlog's context variables, so it follows the scan
    into asyncio.run() and the concurrent lookups of each position.

    Args:
        scan_id: ID to bind; a new UUID4 when omitted.

    Returns:
        The bound scan ID.
    """
    scan_id = scan_id or str(uuid4())
    structlog.contextvars.bind_contextvars(scan_id=scan_id)
    return scan_id
