"""Bluechain Client SDK for the Supply Registry.

Provides async and sync interfaces for the registry's HTTP API.

Example:
    >>> from bluechain_client import RegistryClientSync, SupplyItem
    >>> client = RegistryClientSync("http://localhost:7051")
    >>> client.create_supply_item(SupplyItem("S1", supplierID="sup1", ownerID="own1"))
    >>> client.get_supply_items("own1")
"""

from .client import (
    ClientConfig,
    DuplicateIDError,
    IndexUninitializedError,
    InvalidArgumentsError,
    NotFoundError,
    PermissionDeniedError,
    RegistryClient,
    RegistryClientError,
    RegistryClientSync,
    RegistryConnectionError,
    SupplyItem,
    UnknownOperationError,
)

__all__ = [
    "ClientConfig",
    "DuplicateIDError",
    "IndexUninitializedError",
    "InvalidArgumentsError",
    "NotFoundError",
    "PermissionDeniedError",
    "RegistryClient",
    "RegistryClientError",
    "RegistryClientSync",
    "RegistryConnectionError",
    "SupplyItem",
    "UnknownOperationError",
]
__version__ = "0.1.0"
