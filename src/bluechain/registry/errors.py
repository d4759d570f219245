"""Error taxonomy for the supply registry.

Every failure raised by the registry is a ``RegistryError`` carrying a
stable ``kind`` name plus the key or operation that caused it. The host
adapter surfaces ``kind`` and message to the caller verbatim.
"""

from __future__ import annotations

from typing import Any


class RegistryError(Exception):
    """Base exception for all registry failures."""

    kind: str = "RegistryError"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.key = key
        self.operation = operation

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON error bodies."""
        return {
            "error": self.kind,
            "message": self.message,
            "key": self.key,
            "operation": self.operation,
        }


class InvalidArguments(RegistryError):
    """Wrong number or shape of operation arguments."""

    kind = "InvalidArguments"
    http_status = 400


class DuplicateID(RegistryError):
    """A record already exists at the candidate key."""

    kind = "DuplicateID"
    http_status = 409


class NotFound(RegistryError):
    """No ledger entry exists at the requested key."""

    kind = "NotFound"
    http_status = 404


class CorruptRecord(RegistryError):
    """Stored record bytes failed to decode."""

    kind = "CorruptRecord"
    http_status = 500


class CorruptIndex(RegistryError):
    """Stored index bytes failed to decode."""

    kind = "CorruptIndex"
    http_status = 500


class StorageReadFailed(RegistryError):
    """The ledger reported a failure while reading a key."""

    kind = "StorageReadFailed"
    http_status = 503


class StorageWriteFailed(RegistryError):
    """The ledger rejected a record write."""

    kind = "StorageWriteFailed"
    http_status = 503


class IndexWriteFailed(RegistryError):
    """The ledger rejected a write of the index record."""

    kind = "IndexWriteFailed"
    http_status = 503


class PermissionDenied(RegistryError):
    """Caller is not the owner of the record."""

    kind = "PermissionDenied"
    http_status = 403


class IndexUninitialized(RegistryError):
    """The index record was never created."""

    kind = "IndexUninitialized"
    http_status = 409


class IndexAlreadyInitialized(RegistryError):
    """Initialization was requested on a ledger that already has an index."""

    kind = "IndexAlreadyInitialized"
    http_status = 409


class UnknownOperation(RegistryError):
    """The requested operation name is not registered."""

    kind = "UnknownOperation"
    http_status = 404


__all__ = [
    "RegistryError",
    "InvalidArguments",
    "DuplicateID",
    "NotFound",
    "CorruptRecord",
    "CorruptIndex",
    "StorageReadFailed",
    "StorageWriteFailed",
    "IndexWriteFailed",
    "PermissionDenied",
    "IndexUninitialized",
    "IndexAlreadyInitialized",
    "UnknownOperation",
]
