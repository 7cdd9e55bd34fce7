"""Infrastructure stubs for development and testing.

Available stubs:
- BlockStoreStub: In-memory block store with failure injection. Also
  backs offline scans of a JSON export (see BlockStoreStub.from_records).

WARNING: These stubs are NOT for production use.
Production implementations are in archive_audit/infrastructure/adapters/.
"""

from archive_audit.infrastructure.stubs.block_store_stub import BlockStoreStub

__all__: list[str] = ["BlockStoreStub"]
