"""
Archive Audit - read-only continuity auditor for stored block archives.

Walks the blocks persisted by an archive indexer and checks that every
block's parent hash matches the hash stored for the preceding block number.
A broken link is evidence of a rollback, a fork, or a corrupted archive.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
