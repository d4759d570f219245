"""Unit tests for the Record Store, Index Holder and Uniqueness Guard."""

import pytest

from bluechain.persistence.ledger import InMemoryLedger, LedgerReadError
from bluechain.registry import codec, guard
from bluechain.registry.errors import (
    CorruptIndex,
    CorruptRecord,
    DuplicateID,
    IndexAlreadyInitialized,
    IndexUninitialized,
    IndexWriteFailed,
    NotFound,
    StorageReadFailed,
    StorageWriteFailed,
)
from bluechain.registry.index import IndexHolder
from bluechain.registry.store import RecordStore

from tests.support import FlakyLedger, make_item


class BrokenReadLedger(InMemoryLedger):
    def get(self, key):
        raise LedgerReadError("disk on fire", key)


class TestRecordStore:
    """Tests for point get/put of records."""

    def test_put_then_get(self):
        store = RecordStore(InMemoryLedger())
        item = make_item()
        store.put(item)
        assert store.get("S1") == item

    def test_put_writes_encoded_bytes_at_record_id(self):
        ledger = InMemoryLedger()
        RecordStore(ledger).put(make_item("S7"))
        assert ledger.get("S7") == codec.encode(make_item("S7"))

    def test_get_missing_raises_not_found(self):
        with pytest.raises(NotFound) as exc_info:
            RecordStore(InMemoryLedger()).get("nope")
        assert exc_info.value.key == "nope"

    def test_get_corrupt_bytes_raises_corrupt_record(self):
        store = RecordStore(InMemoryLedger({"S1": b"{broken"}))
        with pytest.raises(CorruptRecord) as exc_info:
            store.get("S1")
        assert exc_info.value.key == "S1"

    def test_get_record_stored_under_wrong_key_is_corrupt(self):
        ledger = InMemoryLedger({"S1": codec.encode(make_item("S2"))})
        with pytest.raises(CorruptRecord):
            RecordStore(ledger).get("S1")

    def test_exists(self):
        store = RecordStore(InMemoryLedger())
        assert store.exists("S1") is False
        store.put(make_item())
        assert store.exists("S1") is True

    def test_exists_is_true_for_corrupt_record(self):
        """Corrupt bytes still occupy the key."""
        store = RecordStore(InMemoryLedger({"S1": b"garbage"}))
        assert store.exists("S1") is True

    def test_put_failure_raises_storage_write_failed(self):
        ledger = FlakyLedger()
        ledger.failing_keys.add("S1")
        with pytest.raises(StorageWriteFailed) as exc_info:
            RecordStore(ledger).put(make_item())
        assert exc_info.value.key == "S1"
        assert "S1" not in ledger

    def test_read_failure_raises_storage_read_failed(self):
        with pytest.raises(StorageReadFailed):
            RecordStore(BrokenReadLedger()).get("S1")

    def test_read_raw_returns_stored_bytes(self):
        store = RecordStore(InMemoryLedger({"anything": b"\x00raw"}))
        assert store.read_raw("anything") == b"\x00raw"

    def test_discard_removes_record(self):
        ledger = InMemoryLedger()
        store = RecordStore(ledger)
        store.put(make_item())
        store.discard("S1")
        assert store.exists("S1") is False


class TestIndexHolder:
    """Tests for the singleton index record."""

    def test_load_before_initialize_raises(self):
        with pytest.raises(IndexUninitialized):
            IndexHolder(InMemoryLedger()).load_index()

    def test_initialize_creates_empty_index(self):
        ledger = InMemoryLedger()
        index = IndexHolder(ledger)
        index.initialize()
        assert index.load_index() == []
        assert ledger.get("supplyItemIDs") == b'{"supplyitemids":[]}'

    def test_initialize_twice_raises_and_keeps_index(self):
        index = IndexHolder(InMemoryLedger())
        index.initialize()
        index.append_id("S1")
        with pytest.raises(IndexAlreadyInitialized):
            index.initialize()
        assert index.load_index() == ["S1"]

    def test_append_preserves_insertion_order(self):
        index = IndexHolder(InMemoryLedger())
        index.initialize()
        for supply_item_id in ["S2", "S1", "S3"]:
            index.append_id(supply_item_id)
        assert index.load_index() == ["S2", "S1", "S3"]

    def test_append_uses_preloaded_ids(self):
        index = IndexHolder(InMemoryLedger())
        index.initialize()
        assert index.append_id("S2", ["S1"]) == ["S1", "S2"]
        assert index.load_index() == ["S1", "S2"]

    def test_custom_index_key(self):
        ledger = InMemoryLedger()
        index = IndexHolder(ledger, index_key="__index__")
        index.initialize()
        assert "__index__" in ledger
        assert "supplyItemIDs" not in ledger

    def test_corrupt_index_raises(self):
        index = IndexHolder(InMemoryLedger({"supplyItemIDs": b"nonsense"}))
        with pytest.raises(CorruptIndex):
            index.load_index()

    def test_write_failure_raises_index_write_failed(self):
        ledger = FlakyLedger()
        index = IndexHolder(ledger)
        index.initialize()
        ledger.failing_keys.add("supplyItemIDs")
        with pytest.raises(IndexWriteFailed):
            index.append_id("S1")
        ledger.failing_keys.clear()
        assert index.load_index() == []


class TestUniquenessGuard:
    """Tests for ensure_unique."""

    def test_unused_id_passes(self):
        guard.ensure_unique(RecordStore(InMemoryLedger()), "S1")

    def test_existing_id_raises_duplicate(self):
        store = RecordStore(InMemoryLedger())
        store.put(make_item())
        with pytest.raises(DuplicateID) as exc_info:
            guard.ensure_unique(store, "S1")
        assert exc_info.value.key == "S1"
