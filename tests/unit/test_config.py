"""Unit tests for RegistryConfig."""

import pytest

from bluechain.registry.models import LEGACY_SCHEMA, OWNERSHIP_SCHEMA
from bluechain.service.config import LedgerBackend, RegistryConfig


@pytest.fixture
def clean_env(monkeypatch):
    for name in [
        "BLUECHAIN_LEDGER_BACKEND",
        "BLUECHAIN_DB_PATH",
        "BLUECHAIN_TRACK_OWNERSHIP",
        "BLUECHAIN_INDEX_KEY",
        "BLUECHAIN_STRICT_INIT",
        "BLUECHAIN_AUTO_INIT",
        "BLUECHAIN_PORT",
        "BLUECHAIN_CORS_ORIGINS",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestRegistryConfig:
    def test_defaults(self, clean_env):
        config = RegistryConfig.from_env()
        assert config.ledger_backend is LedgerBackend.MEMORY
        assert config.track_ownership is True
        assert config.index_key == "supplyItemIDs"
        assert config.strict_initialize is False
        assert config.port == 7051
        assert config.schema == OWNERSHIP_SCHEMA

    def test_env_overrides(self, clean_env):
        clean_env.setenv("BLUECHAIN_LEDGER_BACKEND", "SQLite")
        clean_env.setenv("BLUECHAIN_DB_PATH", "/tmp/x.db")
        clean_env.setenv("BLUECHAIN_TRACK_OWNERSHIP", "off")
        clean_env.setenv("BLUECHAIN_INDEX_KEY", "__ids__")
        clean_env.setenv("BLUECHAIN_STRICT_INIT", "yes")
        clean_env.setenv("BLUECHAIN_PORT", "9000")
        clean_env.setenv("BLUECHAIN_CORS_ORIGINS", "http://a.test, http://b.test")

        config = RegistryConfig.from_env()
        assert config.ledger_backend is LedgerBackend.SQLITE
        assert config.db_path == "/tmp/x.db"
        assert config.schema == LEGACY_SCHEMA
        assert config.index_key == "__ids__"
        assert config.strict_initialize is True
        assert config.port == 9000
        assert config.cors_origins == ["http://a.test", "http://b.test"]

    def test_invalid_backend(self, clean_env):
        clean_env.setenv("BLUECHAIN_LEDGER_BACKEND", "couchdb")
        with pytest.raises(ValueError, match="BLUECHAIN_LEDGER_BACKEND"):
            RegistryConfig.from_env()

    def test_invalid_flag(self, clean_env):
        clean_env.setenv("BLUECHAIN_TRACK_OWNERSHIP", "maybe")
        with pytest.raises(ValueError, match="BLUECHAIN_TRACK_OWNERSHIP"):
            RegistryConfig.from_env()

    def test_empty_index_key_rejected(self):
        with pytest.raises(ValueError):
            RegistryConfig(index_key="")

    def test_backend_accepts_plain_string(self):
        assert RegistryConfig(ledger_backend="sqlite").ledger_backend is LedgerBackend.SQLITE
