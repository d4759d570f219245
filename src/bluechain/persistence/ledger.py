"""Ledger primitives - the key-value store the registry is built on.

The registry only ever talks to the ledger through two primitives:

- ``get(key)`` returns the stored bytes, or ``None`` when nothing is stored
- ``put(key, value)`` stores bytes, raising ``LedgerWriteError`` on failure

``delete`` exists solely so a create whose index write failed can discard
the record it just wrote. No registry operation deletes records.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base exception for ledger backend failures."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class LedgerReadError(LedgerError):
    """The backend could not read a key."""


class LedgerWriteError(LedgerError):
    """The backend could not write or delete a key."""


@runtime_checkable
class Ledger(Protocol):
    """Point-lookup key-value ledger."""

    def get(self, key: str) -> bytes | None: ...

    def put(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> Iterator[str]: ...


class InMemoryLedger:
    """Dict-backed ledger for tests and single-process deployments.

    Example:
        ledger = InMemoryLedger()
        ledger.put("S1", b'{"supplyItemID":"S1"}')
        ledger.get("S1")       # b'{"supplyItemID":"S1"}'
        ledger.get("missing")  # None
    """

    def __init__(self, initial: dict[str, bytes] | None = None):
        self._data: dict[str, bytes] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise LedgerWriteError(f"Ledger values must be bytes, got {type(value).__name__}", key)
        with self._lock:
            self._data[key] = bytes(value)
        logger.debug(f"Ledger put: {key} ({len(value)} bytes)")

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        with self._lock:
            snapshot = list(self._data)
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data


__all__ = [
    "Ledger",
    "LedgerError",
    "LedgerReadError",
    "LedgerWriteError",
    "InMemoryLedger",
]
