"""Application ports (abstract interfaces implemented by infrastructure)."""

from archive_audit.application.ports.block_store import BlockStorePort
from archive_audit.application.ports.scan_observer import ScanObserverPort

__all__: list[str] = ["BlockStorePort", "ScanObserverPort"]
