"""Record Store - point get/put of SupplyItem records on the ledger."""

from __future__ import annotations

import logging
import threading

from ..persistence.ledger import Ledger, LedgerReadError, LedgerWriteError
from . import codec
from .errors import CorruptRecord, NotFound, StorageReadFailed, StorageWriteFailed
from .models import SupplyItem

logger = logging.getLogger(__name__)


class RecordStore:
    """SupplyItem storage keyed by ``supplyItemID``.

    The store owns the registry's single-writer lock. Every read-modify-write
    sequence (create, update, transfer, index append) runs while holding
    ``write_lock``; the ledger itself is only ever called one primitive at a
    time.

    Example:
        store = RecordStore(InMemoryLedger())
        store.put(SupplyItem(supplyItemID="S1", operatorID="op1"))
        store.get("S1").operatorID  # "op1"
        store.exists("S2")          # False
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger
        self.write_lock = threading.RLock()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def read_raw(self, key: str) -> bytes:
        """Return the bytes stored at ``key`` without decoding them.

        Raises:
            NotFound: If nothing is stored at ``key``
            StorageReadFailed: If the ledger read fails
        """
        try:
            data = self._ledger.get(key)
        except LedgerReadError as e:
            raise StorageReadFailed(f"Error retrieving {key!r}: {e}", key=key) from e

        if data is None:
            raise NotFound(f"No record found for {key!r}", key=key)
        return data

    def get(self, supply_item_id: str) -> SupplyItem:
        """Load and decode the record stored under ``supply_item_id``.

        Raises:
            NotFound: If no record exists
            CorruptRecord: If the stored bytes fail to decode
        """
        data = self.read_raw(supply_item_id)
        item = codec.decode(data, supply_item_id)
        if item.supplyItemID != supply_item_id:
            raise CorruptRecord(
                f"Corrupt supplyItem record at {supply_item_id!r}: "
                f"stored ID is {item.supplyItemID!r}",
                key=supply_item_id,
            )
        return item

    def exists(self, supply_item_id: str) -> bool:
        try:
            self.read_raw(supply_item_id)
        except NotFound:
            return False
        return True

    def put(self, item: SupplyItem) -> None:
        """Encode and write ``item`` at its own ID.

        Raises:
            StorageWriteFailed: If the ledger rejects the write
        """
        key = item.supplyItemID
        try:
            self._ledger.put(key, codec.encode(item))
        except LedgerWriteError as e:
            logger.error(f"Error storing supplyItem record {key!r}: {e}")
            raise StorageWriteFailed(f"Error storing supplyItem record {key!r}", key=key) from e
        logger.debug(f"Stored supplyItem {key}")

    def discard(self, supply_item_id: str) -> None:
        """Remove a record written by a create that could not be indexed."""
        try:
            self._ledger.delete(supply_item_id)
        except LedgerWriteError as e:
            raise StorageWriteFailed(
                f"Error discarding un-indexed supplyItem {supply_item_id!r}",
                key=supply_item_id,
            ) from e
        logger.warning(f"Discarded un-indexed supplyItem {supply_item_id}")


__all__ = ["RecordStore"]
