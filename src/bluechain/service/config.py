"""Configuration primitives for the registry service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum

from ..registry.models import INDEX_KEY, SchemaVariant

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class LedgerBackend(str, Enum):
    """Supported ledger backends."""

    MEMORY = "memory"
    SQLITE = "sqlite"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(slots=True)
class RegistryConfig:
    """Runtime configuration for the registry service.

    Configuration Sources (priority order):
    1. Direct constructor arguments
    2. Environment variables (BLUECHAIN_*)
    3. Default values

    Attributes:
        ledger_backend: Ledger backend (default: memory)
        db_path: SQLite database path (default: data/bluechain.db)
        track_ownership: Ownership-tracking schema variant (default: True)
        index_key: Reserved ledger key for the SupplyItem index
        strict_initialize: Fail re-initialization instead of keeping the index
        auto_initialize: Create the index at service start if missing
        port: Service port (default: 7051)
    """

    ledger_backend: LedgerBackend = LedgerBackend.MEMORY
    db_path: str = "data/bluechain.db"
    track_ownership: bool = True
    index_key: str = INDEX_KEY
    strict_initialize: bool = False
    auto_initialize: bool = False
    port: int = 7051
    cors_origins: list[str] = field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    def __post_init__(self) -> None:
        if not self.index_key:
            raise ValueError("index_key must be a non-empty string")
        self.ledger_backend = LedgerBackend(self.ledger_backend)

    @property
    def schema(self) -> SchemaVariant:
        return SchemaVariant(track_ownership=self.track_ownership)

    @classmethod
    def from_env(cls) -> RegistryConfig:
        """Create configuration from environment variables.

        Optional:
            BLUECHAIN_LEDGER_BACKEND: 'memory' or 'sqlite'
            BLUECHAIN_DB_PATH: SQLite database path
            BLUECHAIN_TRACK_OWNERSHIP: Enable the ownership schema (default: 1)
            BLUECHAIN_INDEX_KEY: Reserved index key (default: supplyItemIDs)
            BLUECHAIN_STRICT_INIT: Reject re-initialization (default: 0)
            BLUECHAIN_AUTO_INIT: Initialize the index at startup (default: 0)
            BLUECHAIN_PORT: Service port (default: 7051)
            BLUECHAIN_CORS_ORIGINS: Comma-separated list of allowed origins
        """
        backend = os.environ.get("BLUECHAIN_LEDGER_BACKEND", "memory").strip().lower()
        try:
            ledger_backend = LedgerBackend(backend)
        except ValueError as e:
            raise ValueError(
                f"BLUECHAIN_LEDGER_BACKEND must be one of "
                f"{[b.value for b in LedgerBackend]}, got {backend!r}"
            ) from e

        config = cls(
            ledger_backend=ledger_backend,
            db_path=os.environ.get("BLUECHAIN_DB_PATH", "data/bluechain.db"),
            track_ownership=_env_flag("BLUECHAIN_TRACK_OWNERSHIP", True),
            index_key=os.environ.get("BLUECHAIN_INDEX_KEY", INDEX_KEY),
            strict_initialize=_env_flag("BLUECHAIN_STRICT_INIT", False),
            auto_initialize=_env_flag("BLUECHAIN_AUTO_INIT", False),
            port=int(os.environ.get("BLUECHAIN_PORT", "7051")),
        )

        origins = os.environ.get("BLUECHAIN_CORS_ORIGINS", "")
        if origins:
            config.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]

        return config
