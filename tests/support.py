"""Shared test helpers."""

from bluechain.persistence.ledger import InMemoryLedger, LedgerWriteError
from bluechain.registry import SupplyItem

# Create args for S1 in the ownership-tracking schema
S1_ARGS = ["S1", "sup1", "op1", "own1", "10.0", "20.0", "desc", "metal", "5", "kg", "photo.jpg"]


class FlakyLedger(InMemoryLedger):
    """In-memory ledger whose writes to selected keys fail."""

    def __init__(self):
        super().__init__()
        self.failing_keys: set[str] = set()
        self.fail_deletes = False

    def put(self, key: str, value: bytes) -> None:
        if key in self.failing_keys:
            raise LedgerWriteError(f"simulated write failure for {key}", key)
        super().put(key, value)

    def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise LedgerWriteError(f"simulated delete failure for {key}", key)
        super().delete(key)


def make_item(supply_item_id: str = "S1", owner_id: str = "own1", **overrides) -> SupplyItem:
    values = dict(
        supplyItemID=supply_item_id,
        supplierID="sup1",
        operatorID="op1",
        ownerID=owner_id,
        longitude="10.0",
        latitude="20.0",
        description="desc",
        materialType="metal",
        materialQuantity="5",
        unitOfMeasure="kg",
        photo="photo.jpg",
    )
    values.update(overrides)
    return SupplyItem(**values)
