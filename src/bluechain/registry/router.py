"""Operation Router - map (function, args) invocations onto registry operations.

Each invocation is independent: the router keeps no state of its own beyond
the components it wires together, and every operation runs to completion as
one synchronous unit returning ``bytes`` (reads) or ``None`` (mutations), or
raising a ``RegistryError``.

Operations are grouped the way the ledger host invokes them:

- deploy: ``initialize``
- invoke: ``create_supplyItem``, ``update_supplyItem``, ``transfer_supplyItem``
- query: ``read``, ``get_supplyItems``
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import cast

from ..persistence.ledger import Ledger
from . import guard, ownership
from .errors import (
    IndexAlreadyInitialized,
    IndexWriteFailed,
    InvalidArguments,
    NotFound,
    RegistryError,
    StorageWriteFailed,
    UnknownOperation,
)
from .index import IndexHolder
from .models import INDEX_KEY, OWNERSHIP_SCHEMA, SchemaVariant, SupplyItem
from .store import RecordStore

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    """How the host is allowed to invoke an operation."""

    DEPLOY = "deploy"
    INVOKE = "invoke"
    QUERY = "query"


@dataclass(frozen=True, slots=True)
class Operation:
    """A registered operation."""

    name: str
    kind: OperationKind
    handler: Callable[[list[str]], bytes | None]


class SupplyRegistry:
    """SupplyItem registry over a key-value ledger.

    Example:
        registry = SupplyRegistry(InMemoryLedger())
        registry.initialize()
        registry.invoke("create_supplyItem", ["S1", "sup1", "op1", "own1",
                        "10.0", "20.0", "desc", "metal", "5", "kg", "photo.jpg"])
        registry.query("get_supplyItems", ["own1"])  # b'[{"supplyItemID":"S1",...}]'
    """

    def __init__(
        self,
        ledger: Ledger,
        *,
        schema: SchemaVariant = OWNERSHIP_SCHEMA,
        index_key: str = INDEX_KEY,
        strict_initialize: bool = False,
    ):
        self.schema = schema
        self.strict_initialize = strict_initialize
        self.store = RecordStore(ledger)
        self.index = IndexHolder(ledger, index_key)

        self._operations: dict[str, Operation] = {}
        self._register("initialize", OperationKind.DEPLOY, self._op_initialize, "init")
        self._register("create_supplyItem", OperationKind.INVOKE, self._op_create)
        self._register("update_supplyItem", OperationKind.INVOKE, self._op_update)
        self._register("read", OperationKind.QUERY, self._op_read)
        if schema.track_ownership:
            self._register("transfer_supplyItem", OperationKind.INVOKE, self._op_transfer)
            self._register("get_supplyItems", OperationKind.QUERY, self._op_list_visible)

    def _register(
        self,
        name: str,
        kind: OperationKind,
        handler: Callable[[list[str]], bytes | None],
        *aliases: str,
    ) -> None:
        operation = Operation(name=name, kind=kind, handler=handler)
        for key in (name, *aliases):
            self._operations[key] = operation

    @property
    def operations(self) -> list[str]:
        """Names of all registered operations (without aliases)."""
        return sorted({op.name for op in self._operations.values()})

    # -----------------------------------------------------------------------
    # Dispatch
    # -----------------------------------------------------------------------

    def dispatch(
        self,
        function: str,
        args: Sequence[str] = (),
        *,
        kinds: Sequence[OperationKind] | None = None,
    ) -> bytes | None:
        """Run the operation named ``function`` with positional ``args``.

        Args:
            function: Operation name
            args: Positional string arguments
            kinds: Restrict dispatch to these operation kinds

        Raises:
            UnknownOperation: If no operation (of an allowed kind) has this name
        """
        operation = self._operations.get(function)
        if operation is None or (kinds is not None and operation.kind not in kinds):
            raise UnknownOperation(
                f"Received unknown function invocation {function}", operation=function
            )

        args = list(args)
        for arg in args:
            if not isinstance(arg, str):
                raise InvalidArguments(
                    f"{operation.name}: arguments must be strings", operation=operation.name
                )

        logger.debug(f"Dispatching {operation.name} with {len(args)} args")
        try:
            return operation.handler(args)
        except RegistryError as e:
            if e.operation is None:
                e.operation = operation.name
            raise

    def invoke(self, function: str, args: Sequence[str] = ()) -> bytes | None:
        """Run a mutating operation."""
        return self.dispatch(function, args, kinds=(OperationKind.INVOKE,))

    def query(self, function: str, args: Sequence[str] = ()) -> bytes | None:
        """Run a read-only operation."""
        return self.dispatch(function, args, kinds=(OperationKind.QUERY,))

    # -----------------------------------------------------------------------
    # Typed API
    # -----------------------------------------------------------------------

    def initialize(self) -> None:
        self.dispatch("initialize")

    def create(self, item: SupplyItem) -> None:
        self.dispatch("create_supplyItem", self.schema.create_args(item))

    def update(self, supply_item_id: str, operator_id: str) -> None:
        self.dispatch("update_supplyItem", [supply_item_id, operator_id])

    def transfer(self, supply_item_id: str, caller_id: str, new_owner_id: str) -> None:
        self.dispatch("transfer_supplyItem", [supply_item_id, caller_id, new_owner_id])

    def read(self, key: str) -> bytes:
        return cast(bytes, self.dispatch("read", [key]))

    def list_visible(self, caller_id: str) -> bytes:
        return cast(bytes, self.dispatch("get_supplyItems", [caller_id]))

    # -----------------------------------------------------------------------
    # Handlers
    # -----------------------------------------------------------------------

    @staticmethod
    def _expect_args(name: str, args: list[str], count: int) -> None:
        if len(args) != count:
            raise InvalidArguments(
                f"Incorrect number of arguments passed to {name}: "
                f"expected {count}, got {len(args)}",
                operation=name,
            )

    def _op_initialize(self, args: list[str]) -> None:
        self._expect_args("initialize", args, 0)
        with self.store.write_lock:
            try:
                self.index.initialize()
            except IndexAlreadyInitialized:
                if self.strict_initialize:
                    raise
                logger.info(f"Index {self.index.index_key} already present, keeping it")
        return None

    def _op_create(self, args: list[str]) -> None:
        self._expect_args("create_supplyItem", args, self.schema.create_arity)
        item = self.schema.build_item(args)
        key = item.supplyItemID

        if not key:
            raise InvalidArguments("Invalid supplyItemID provided", operation="create_supplyItem")
        if key == self.index.index_key:
            raise InvalidArguments(
                f"supplyItemID {key!r} is reserved for the index",
                key=key,
                operation="create_supplyItem",
            )
        if self.schema.track_ownership and not item.ownerID:
            raise InvalidArguments(
                "Invalid ownerID provided", key=key, operation="create_supplyItem"
            )

        with self.store.write_lock:
            guard.ensure_unique(self.store, key)
            # Load before writing so an uninitialized or corrupt index aborts cleanly
            ids = self.index.load_index()
            self.store.put(item)
            try:
                self.index.append_id(key, ids)
            except IndexWriteFailed:
                logger.error(f"Index write failed after storing {key}, rolling back")
                try:
                    self.store.discard(key)
                except StorageWriteFailed:
                    logger.critical(f"SupplyItem {key} is stored but not indexed")
                raise

        logger.info(f"Created supplyItem {key}")
        return None

    def _load_record(self, supply_item_id: str) -> SupplyItem:
        if supply_item_id == self.index.index_key:
            raise NotFound(f"No record found for {supply_item_id!r}", key=supply_item_id)
        return self.store.get(supply_item_id)

    def _op_update(self, args: list[str]) -> None:
        self._expect_args("update_supplyItem", args, 2)
        supply_item_id, operator_id = args

        with self.store.write_lock:
            item = self._load_record(supply_item_id)
            item.operatorID = operator_id
            self.store.put(item)

        logger.info(f"Updated operator of supplyItem {supply_item_id}")
        return None

    def _op_transfer(self, args: list[str]) -> None:
        self._expect_args("transfer_supplyItem", args, 3)
        supply_item_id, caller_id, new_owner_id = args
        if not new_owner_id:
            raise InvalidArguments(
                "transfer_supplyItem requires a new owner",
                key=supply_item_id,
                operation="transfer_supplyItem",
            )

        with self.store.write_lock:
            item = self._load_record(supply_item_id)
            ownership.ensure_owner(item, caller_id)
            item.ownerID = new_owner_id
            self.store.put(item)

        logger.info(f"Transferred supplyItem {supply_item_id} to {new_owner_id}")
        return None

    def _op_read(self, args: list[str]) -> bytes:
        self._expect_args("read", args, 1)
        return self.store.read_raw(args[0])

    def _op_list_visible(self, args: list[str]) -> bytes:
        self._expect_args("get_supplyItems", args, 1)
        caller_id = args[0]

        ids = self.index.load_index()
        # A broken index entry aborts the whole listing
        items = [self.store.get(supply_item_id) for supply_item_id in ids]
        revealed = list(ownership.visible(items, caller_id))
        return b"[" + b",".join(revealed) + b"]"


__all__ = ["SupplyRegistry", "Operation", "OperationKind"]
