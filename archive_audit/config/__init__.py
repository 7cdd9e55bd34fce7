"""Configuration for archive audit."""

from archive_audit.config.block_store_config import BlockStoreConfig

__all__: list[str] = ["BlockStoreConfig"]
