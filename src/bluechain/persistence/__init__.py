"""Persistence layer - ledger backends."""

from .database import SqliteLedger
from .ledger import (
    InMemoryLedger,
    Ledger,
    LedgerError,
    LedgerReadError,
    LedgerWriteError,
)

__all__ = [
    "Ledger",
    "LedgerError",
    "LedgerReadError",
    "LedgerWriteError",
    "InMemoryLedger",
    "SqliteLedger",
]
