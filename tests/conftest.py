"""
Pytest configuration and shared fixtures for archive audit tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async port mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/ (Docker required)
"""

import pytest
import structlog


@pytest.fixture(autouse=True)
def clear_scan_id() -> None:
    """Start every test without a scan ID in context."""
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def reset_structlog_config():
    """Undo per-test structlog configuration (e.g. a stream closed by CliRunner)."""
    yield
    structlog.reset_defaults()
