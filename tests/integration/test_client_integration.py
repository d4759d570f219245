"""Integration tests: async client against the ASGI app."""

import httpx
import pytest

from bluechain.persistence.ledger import InMemoryLedger
from bluechain.service.app import create_registry_app
from bluechain.service.config import RegistryConfig
from bluechain_client import (
    DuplicateIDError,
    IndexUninitializedError,
    RegistryClient,
    SupplyItem,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def app():
    return create_registry_app(RegistryConfig(), ledger=InMemoryLedger())


@pytest.fixture
def client(app):
    return RegistryClient(
        "http://registry.test",
        transport=httpx.ASGITransport(app=app),
    )


def _item(supply_item_id: str, owner: str) -> SupplyItem:
    return SupplyItem(
        supply_item_id,
        supplierID="sup1",
        operatorID="op1",
        ownerID=owner,
        longitude="10.0",
        latitude="20.0",
        description="desc",
        materialType="metal",
        materialQuantity="5",
        unitOfMeasure="kg",
        photo="photo.jpg",
    )


class TestAsyncClient:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self, client):
        async with client:
            await client.initialize()
            await client.create_supply_item(_item("S1", "own1"))
            await client.create_supply_item(_item("S2", "own2"))

            await client.update_supply_item("S1", "op2")
            item = await client.get_supply_item("S1")
            assert item.operatorID == "op2"
            assert item.ownerID == "own1"

            assert [i.supplyItemID for i in await client.get_supply_items("own1")] == ["S1"]
            assert await client.get_supply_items("nobody") == []

            await client.transfer_supply_item("S2", "own2", "own1")
            owned = await client.get_supply_items("own1")
            assert [i.supplyItemID for i in owned] == ["S1", "S2"]

    @pytest.mark.asyncio
    async def test_duplicate_raises(self, client):
        async with client:
            await client.initialize()
            await client.create_supply_item(_item("S1", "own1"))
            with pytest.raises(DuplicateIDError) as exc_info:
                await client.create_supply_item(_item("S1", "own9"))
            assert exc_info.value.key == "S1"
            assert (await client.get_supply_item("S1")).ownerID == "own1"

    @pytest.mark.asyncio
    async def test_uninitialized(self, client):
        async with client:
            with pytest.raises(IndexUninitializedError):
                await client.get_supply_items("own1")

    @pytest.mark.asyncio
    async def test_health(self, client):
        async with client:
            await client.initialize()
            health = await client.health()
            assert health["status"] == "ok"
