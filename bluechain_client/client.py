"""Registry client implementation with async/sync interfaces."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import time
from dataclasses import asdict, dataclass, fields
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class RegistryClientError(Exception):
    """Base exception for registry client errors.

    ``kind`` is the server's failure kind (e.g. ``DuplicateID``) when the
    server answered with an error body.
    """

    kind: str = "RegistryClientError"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        key: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.key = key
        self.operation = operation


class RegistryConnectionError(RegistryClientError):
    """Connection to the registry failed."""

    kind = "ConnectionError"


class InvalidArgumentsError(RegistryClientError):
    kind = "InvalidArguments"


class DuplicateIDError(RegistryClientError):
    kind = "DuplicateID"


class NotFoundError(RegistryClientError):
    kind = "NotFound"


class PermissionDeniedError(RegistryClientError):
    kind = "PermissionDenied"


class UnknownOperationError(RegistryClientError):
    kind = "UnknownOperation"


class IndexUninitializedError(RegistryClientError):
    kind = "IndexUninitialized"


_ERRORS_BY_KIND: dict[str, type[RegistryClientError]] = {
    cls.kind: cls
    for cls in (
        InvalidArgumentsError,
        DuplicateIDError,
        NotFoundError,
        PermissionDeniedError,
        UnknownOperationError,
        IndexUninitializedError,
    )
}


def error_from_response(response: httpx.Response) -> RegistryClientError:
    """Build the typed client error for a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if not isinstance(body, dict) or "error" not in body:
        return RegistryClientError(
            f"HTTP {response.status_code}: {response.text}", response.status_code
        )

    kind = str(body["error"])
    error_cls = _ERRORS_BY_KIND.get(kind, RegistryClientError)
    error = error_cls(
        body.get("message") or kind,
        response.status_code,
        key=body.get("key"),
        operation=body.get("operation"),
    )
    # Kinds without a dedicated class keep the server's name
    error.kind = kind
    return error


# ---------------------------------------------------------------------------
# Models (mirror the server record for type safety)
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class SupplyItem:
    """A supply item record as returned by the registry."""

    supplyItemID: str
    supplierID: str = ""
    operatorID: str = ""
    ownerID: str = ""
    longitude: str = ""
    latitude: str = ""
    description: str = ""
    materialType: str = ""
    materialQuantity: str = ""
    unitOfMeasure: str = ""
    photo: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SupplyItem:
        known = {f.name for f in fields(cls)}
        # Null fields read back as empty, matching the server codec
        return cls(
            **{k: "" if v is None else str(v) for k, v in data.items() if k in known}
        )

    def create_args(self, track_ownership: bool = True) -> list[str]:
        """Positional arguments for ``create_supplyItem``."""
        values = asdict(self)
        if not track_ownership:
            values.pop("ownerID")
        return list(values.values())


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ClientConfig:
    """Configuration for registry clients."""

    base_url: str = "http://localhost:7051"
    timeout: float = 30.0
    max_retries: int = 3
    retry_backoff: float = 0.5
    track_ownership: bool = True

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Load configuration from environment variables."""
        return cls(
            base_url=os.environ.get("BLUECHAIN_URL", "http://localhost:7051"),
            timeout=float(os.environ.get("BLUECHAIN_TIMEOUT", "30.0")),
            max_retries=int(os.environ.get("BLUECHAIN_MAX_RETRIES", "3")),
        )


def _result(data: dict[str, Any]) -> str | None:
    return data.get("result")


def _parse_items(result: str | None) -> list[SupplyItem]:
    return [SupplyItem.from_dict(d) for d in json.loads(result or "[]")]


# ---------------------------------------------------------------------------
# Async Client
# ---------------------------------------------------------------------------


class RegistryClient:
    """Async client for the supply registry.

    Only connection failures are retried: the request never reached the
    server, so retrying cannot apply a mutation twice.

    Example:
        >>> async with RegistryClient("http://localhost:7051") as client:
        ...     await client.initialize()
        ...     await client.create_supply_item(SupplyItem("S1", ownerID="own1"))
        ...     items = await client.get_supply_items("own1")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:7051",
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
        track_ownership: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = ClientConfig(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            max_retries=max_retries,
            retry_backoff=retry_backoff,
            track_ownership=track_ownership,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> RegistryClient:
        await self._ensure_client()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ) -> dict[str, Any]:
        client = await self._ensure_client()
        headers = {"X-Correlation-ID": correlation_id} if correlation_id else {}

        for attempt in range(self._config.max_retries):
            try:
                response = await client.request(method, path, json=json, headers=headers)
            except httpx.ConnectError as e:
                if attempt == self._config.max_retries - 1:
                    raise RegistryConnectionError(f"Connection failed: {e}") from e
                delay = self._config.retry_backoff * (2**attempt)
                logger.debug(f"Retry {attempt + 1}/{self._config.max_retries} after {delay}s")
                await asyncio.sleep(delay)
                continue
            except httpx.TimeoutException as e:
                raise RegistryConnectionError(f"Request timed out: {e}") from e

            if response.is_error:
                raise error_from_response(response)
            return response.json()

        raise RegistryConnectionError("Request failed after retries")

    async def _call(self, channel: str, function: str, args: list[str]) -> str | None:
        data = await self._request("POST", f"/{channel}", json={"function": function, "args": args})
        return _result(data)

    async def initialize(self) -> None:
        """Create the SupplyItem index."""
        await self._request("POST", "/init")

    async def create_supply_item(self, item: SupplyItem) -> None:
        await self._call(
            "invoke", "create_supplyItem", item.create_args(self._config.track_ownership)
        )

    async def update_supply_item(self, supply_item_id: str, operator_id: str) -> None:
        await self._call("invoke", "update_supplyItem", [supply_item_id, operator_id])

    async def transfer_supply_item(
        self, supply_item_id: str, caller_id: str, new_owner_id: str
    ) -> None:
        await self._call(
            "invoke", "transfer_supplyItem", [supply_item_id, caller_id, new_owner_id]
        )

    async def read(self, key: str) -> str:
        """Raw value stored at ``key``."""
        return await self._call("query", "read", [key]) or ""

    async def get_supply_item(self, supply_item_id: str) -> SupplyItem:
        return SupplyItem.from_dict(json.loads(await self.read(supply_item_id)))

    async def get_supply_items(self, caller_id: str) -> list[SupplyItem]:
        """Records owned by ``caller_id``, in creation order."""
        return _parse_items(await self._call("query", "get_supplyItems", [caller_id]))

    async def health(self) -> dict[str, Any]:
        """Get service health status."""
        return await self._request("GET", "/healthz")


# ---------------------------------------------------------------------------
# Sync Client
# ---------------------------------------------------------------------------


class RegistryClientSync:
    """Synchronous registry client.

    Example:
        >>> with RegistryClientSync("http://localhost:7051") as client:
        ...     client.update_supply_item("S1", "op2")
        ...     client.get_supply_item("S1").operatorID
        'op2'
    """

    def __init__(
        self,
        base_url: str = "http://localhost:7051",
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
        track_ownership: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        self._config = ClientConfig(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            max_retries=max_retries,
            retry_backoff=retry_backoff,
            track_ownership=track_ownership,
        )
        self._client = httpx.Client(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            transport=transport,
        )

    def __enter__(self) -> RegistryClientSync:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        """Close the client."""
        self._client.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        for attempt in range(self._config.max_retries):
            try:
                response = self._client.request(method, path, json=json)
            except httpx.ConnectError as e:
                if attempt == self._config.max_retries - 1:
                    raise RegistryConnectionError(f"Connection failed: {e}") from e
                time.sleep(self._config.retry_backoff * (2**attempt))
                continue
            except httpx.TimeoutException as e:
                raise RegistryConnectionError(f"Request timed out: {e}") from e

            if response.is_error:
                raise error_from_response(response)
            return response.json()

        raise RegistryConnectionError("Request failed after retries")

    def _call(self, channel: str, function: str, args: list[str]) -> str | None:
        return _result(self._request("POST", f"/{channel}", json={"function": function, "args": args}))

    def initialize(self) -> None:
        self._request("POST", "/init")

    def create_supply_item(self, item: SupplyItem) -> None:
        self._call("invoke", "create_supplyItem", item.create_args(self._config.track_ownership))

    def update_supply_item(self, supply_item_id: str, operator_id: str) -> None:
        self._call("invoke", "update_supplyItem", [supply_item_id, operator_id])

    def transfer_supply_item(self, supply_item_id: str, caller_id: str, new_owner_id: str) -> None:
        self._call("invoke", "transfer_supplyItem", [supply_item_id, caller_id, new_owner_id])

    def read(self, key: str) -> str:
        return self._call("query", "read", [key]) or ""

    def get_supply_item(self, supply_item_id: str) -> SupplyItem:
        return SupplyItem.from_dict(json.loads(self.read(supply_item_id)))

    def get_supply_items(self, caller_id: str) -> list[SupplyItem]:
        return _parse_items(self._call("query", "get_supplyItems", [caller_id]))

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/healthz")
