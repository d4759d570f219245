"""Registry core - SupplyItem records, the ID index, and operation routing."""

from .errors import RegistryError
from .index import IndexHolder
from .models import INDEX_KEY, LEGACY_SCHEMA, OWNERSHIP_SCHEMA, SchemaVariant, SupplyItem
from .router import OperationKind, SupplyRegistry
from .store import RecordStore

__all__ = [
    "INDEX_KEY",
    "IndexHolder",
    "LEGACY_SCHEMA",
    "OWNERSHIP_SCHEMA",
    "OperationKind",
    "RecordStore",
    "RegistryError",
    "SchemaVariant",
    "SupplyItem",
    "SupplyRegistry",
]
