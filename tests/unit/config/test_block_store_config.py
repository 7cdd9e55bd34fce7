"""Unit tests for BlockStoreConfig.

Tests environment loading, validation and URL conversion.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from archive_audit.config import BlockStoreConfig
from archive_audit.config.block_store_config import (
    DEFAULT_QUERY_TIMEOUT_SECONDS,
    DEFAULT_TABLE,
)
from archive_audit.domain.errors import InvalidConfigurationError


class TestBlockStoreConfig:
    """Tests for BlockStoreConfig dataclass."""

    def test_defaults(self) -> None:
        config = BlockStoreConfig()
        assert config.database_url == ""
        assert config.table_name == DEFAULT_TABLE == "block"
        assert config.query_timeout_seconds == DEFAULT_QUERY_TIMEOUT_SECONDS
        assert config.echo is False

    def test_config_is_frozen(self) -> None:
        config = BlockStoreConfig()
        with pytest.raises(AttributeError):
            config.table_name = "other"  # type: ignore[misc]

    @pytest.mark.parametrize("table", ["block", "archive.block", "_blocks2"])
    def test_valid_table_names(self, table: str) -> None:
        assert BlockStoreConfig(table_name=table).table_name == table

    @pytest.mark.parametrize(
        "table", ["", "block; DROP TABLE block", "1block", "a.b.c", "blo ck"]
    )
    def test_invalid_table_names_raise(self, table: str) -> None:
        with pytest.raises(InvalidConfigurationError):
            BlockStoreConfig(table_name=table)

    def test_non_positive_timeout_raises(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            BlockStoreConfig(query_timeout_seconds=0)


class TestAsyncDatabaseUrl:
    """Tests for asyncpg URL conversion."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ],
    )
    def test_conversion(self, url: str, expected: str) -> None:
        assert BlockStoreConfig(database_url=url).async_database_url == expected

    def test_missing_url_raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="DATABASE_URL"):
            _ = BlockStoreConfig().async_database_url

    @pytest.mark.parametrize(
        "url",
        [
            "postgresql+psycopg://u:p@h/db",
            "postgresql+psycopg2://u:p@h/db",
            "mysql://u:p@h/db",
            "sqlite:///archive.db",
        ],
    )
    def test_unknown_scheme_raises(self, url: str) -> None:
        with pytest.raises(
            InvalidConfigurationError, match="Unsupported database URL scheme"
        ):
            _ = BlockStoreConfig(database_url=url).async_database_url


class TestFromEnv:
    """Tests for environment variable loading."""

    def test_from_env_reads_all_values(self) -> None:
        env = {
            "DATABASE_URL": "postgresql://u:p@h/archive",
            "ARCHIVE_AUDIT_TABLE": "archive.block",
            "ARCHIVE_AUDIT_QUERY_TIMEOUT": "12.5",
            "SQLALCHEMY_ECHO": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = BlockStoreConfig.from_env()
        assert config.database_url == "postgresql://u:p@h/archive"
        assert config.table_name == "archive.block"
        assert config.query_timeout_seconds == 12.5
        assert config.echo is True

    def test_from_env_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = BlockStoreConfig.from_env()
        assert config == BlockStoreConfig()

    def test_invalid_timeout_falls_back_to_default(self) -> None:
        with patch.dict(
            os.environ, {"ARCHIVE_AUDIT_QUERY_TIMEOUT": "soon"}, clear=True
        ):
            config = BlockStoreConfig.from_env()
        assert config.query_timeout_seconds == DEFAULT_QUERY_TIMEOUT_SECONDS


class TestWithOverrides:
    """Tests for command-line overrides."""

    def test_overrides_applied(self) -> None:
        config = BlockStoreConfig(database_url="postgresql://a/b").with_overrides(
            database_url="postgresql://c/d", table_name="blocks"
        )
        assert config.database_url == "postgresql://c/d"
        assert config.table_name == "blocks"

    def test_none_keeps_values(self) -> None:
        config = BlockStoreConfig(database_url="postgresql://a/b")
        assert config.with_overrides() is config

    def test_override_table_is_validated(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            BlockStoreConfig().with_overrides(table_name="bad name")
