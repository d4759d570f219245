"""Registry service layer - FastAPI host adapter and configuration."""

from .app import create_registry_app
from .config import LedgerBackend, RegistryConfig

__all__ = ["create_registry_app", "LedgerBackend", "RegistryConfig"]
