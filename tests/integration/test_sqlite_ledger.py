"""Integration tests for the registry on the SQLite ledger."""

import json

import pytest

from bluechain.persistence.database import SqliteLedger
from bluechain.registry import SupplyRegistry
from bluechain.registry.errors import DuplicateID

from tests.support import S1_ARGS, make_item

pytestmark = pytest.mark.integration


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "ledger" / "bluechain.db"


class TestSqliteLedger:
    def test_get_missing_is_none(self, db_path):
        with SqliteLedger(db_path) as ledger:
            assert ledger.get("nope") is None

    def test_put_overwrites(self, db_path):
        with SqliteLedger(db_path) as ledger:
            ledger.put("k", b"one")
            ledger.put("k", b"two")
            assert ledger.get("k") == b"two"
            assert ledger.count() == 1

    def test_delete_and_keys(self, db_path):
        with SqliteLedger(db_path) as ledger:
            ledger.put("b", b"1")
            ledger.put("a", b"2")
            ledger.delete("b")
            ledger.delete("never-existed")
            assert list(ledger.keys()) == ["a"]

    def test_binary_values(self, db_path):
        with SqliteLedger(db_path) as ledger:
            ledger.put("bin", b"\x00\xff\x10")
            assert ledger.get("bin") == b"\x00\xff\x10"


class TestRegistryOnSqlite:
    """End-to-end registry behavior across ledger reopenings."""

    def test_records_and_index_survive_restart(self, db_path):
        with SqliteLedger(db_path) as ledger:
            registry = SupplyRegistry(ledger)
            registry.initialize()
            registry.invoke("create_supplyItem", S1_ARGS)
            registry.create(make_item("S2", owner_id="own2"))

        with SqliteLedger(db_path) as ledger:
            registry = SupplyRegistry(ledger)
            registry.initialize()  # keeps the existing index
            assert registry.index.load_index() == ["S1", "S2"]
            with pytest.raises(DuplicateID):
                registry.invoke("create_supplyItem", S1_ARGS)

            registry.update("S1", "op2")
            owned = json.loads(registry.list_visible("own1"))
            assert owned == [make_item(operatorID="op2").to_dict()]

    def test_index_matches_record_keys(self, db_path):
        with SqliteLedger(db_path) as ledger:
            registry = SupplyRegistry(ledger)
            registry.initialize()
            for n in range(10):
                registry.create(make_item(f"S{n}"))

            records = {k for k in ledger.keys() if k != "supplyItemIDs"}
            assert set(registry.index.load_index()) == records
