"""Index Holder - the ordered list of every SupplyItem ID.

The ledger only supports point lookups, so enumeration goes through a
singleton index record at a reserved key. The index is created empty at
deployment, appended to by every create, and never shrinks.

The load/append/write sequence is not safe under concurrent writers; callers
hold ``RecordStore.write_lock`` around ``append_id``.
"""

from __future__ import annotations

import logging

from ..persistence.ledger import Ledger, LedgerReadError, LedgerWriteError
from . import codec
from .errors import (
    IndexAlreadyInitialized,
    IndexUninitialized,
    IndexWriteFailed,
    StorageReadFailed,
)
from .models import INDEX_KEY

logger = logging.getLogger(__name__)


class IndexHolder:
    """Read-modify-write access to the SupplyItem index record."""

    def __init__(self, ledger: Ledger, index_key: str = INDEX_KEY):
        self._ledger = ledger
        self.index_key = index_key

    def _read(self) -> bytes | None:
        try:
            return self._ledger.get(self.index_key)
        except LedgerReadError as e:
            raise StorageReadFailed(
                f"Unable to get {self.index_key}: {e}", key=self.index_key
            ) from e

    def is_initialized(self) -> bool:
        return self._read() is not None

    def initialize(self) -> None:
        """Write an empty index at the reserved key.

        Raises:
            IndexAlreadyInitialized: If an index already exists
            IndexWriteFailed: If the ledger rejects the write
        """
        if self.is_initialized():
            raise IndexAlreadyInitialized(
                f"Index already exists at {self.index_key!r}", key=self.index_key
            )
        self.save_index([])
        logger.info(f"Initialized empty supplyItem index at {self.index_key}")

    def load_index(self) -> list[str]:
        """Return every record ID in creation order.

        Raises:
            IndexUninitialized: If the index was never created
            CorruptIndex: If the index bytes fail to decode
        """
        data = self._read()
        if data is None:
            raise IndexUninitialized(
                f"Index {self.index_key!r} has not been initialized", key=self.index_key
            )
        return codec.decode_index(data, self.index_key)

    def save_index(self, ids: list[str]) -> None:
        try:
            self._ledger.put(self.index_key, codec.encode_index(ids))
        except LedgerWriteError as e:
            raise IndexWriteFailed(
                f"Unable to write {self.index_key}: {e}", key=self.index_key
            ) from e

    def append_id(self, supply_item_id: str, ids: list[str] | None = None) -> list[str]:
        """Append ``supply_item_id`` to the index and write it back.

        Args:
            supply_item_id: ID of a record that was just created
            ids: Index contents already loaded by the caller, if any

        Returns:
            The index as written
        """
        if ids is None:
            ids = self.load_index()
        updated = [*ids, supply_item_id]
        self.save_index(updated)
        logger.debug(f"Indexed supplyItem {supply_item_id} ({len(updated)} total)")
        return updated


__all__ = ["IndexHolder"]
