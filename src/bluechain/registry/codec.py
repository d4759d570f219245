"""Record codec - SupplyItem and index records to and from ledger bytes.

Records are stored as compact JSON objects with a fixed field order, so
``decode(encode(item)) == item`` for every item. Decoding is lenient about
shape (unknown fields ignored, missing fields become ``""``) but strict about
content: anything that is not a JSON object of strings is corrupt.
"""

from __future__ import annotations

import json
from typing import Any

from .errors import CorruptIndex, CorruptRecord
from .models import FIELD_NAMES, SupplyItem

# JSON attribute wrapping the list of IDs in the index record
INDEX_FIELD = "supplyitemids"


def _dumps(payload: Any) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _loads(data: bytes) -> Any:
    return json.loads(data.decode("utf-8"))


def encode(item: SupplyItem) -> bytes:
    """Serialize a SupplyItem to ledger bytes."""
    return _dumps(item.to_dict())


def decode(data: bytes, key: str) -> SupplyItem:
    """Deserialize ledger bytes stored at ``key`` into a SupplyItem.

    Args:
        data: Raw bytes read from the ledger
        key: Ledger key the bytes came from (reported on failure)

    Raises:
        CorruptRecord: If the bytes are not a JSON object of string values
    """
    try:
        payload = _loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise CorruptRecord(f"Corrupt supplyItem record at {key!r}: {e}", key=key) from e

    if not isinstance(payload, dict):
        raise CorruptRecord(
            f"Corrupt supplyItem record at {key!r}: expected object, "
            f"got {type(payload).__name__}",
            key=key,
        )

    values: dict[str, str] = {}
    for name in FIELD_NAMES:
        value = payload.get(name, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise CorruptRecord(
                f"Corrupt supplyItem record at {key!r}: field {name!r} "
                f"is {type(value).__name__}, expected string",
                key=key,
            )
        values[name] = value

    return SupplyItem(**values)


def encode_index(ids: list[str]) -> bytes:
    """Serialize the ordered list of record IDs to ledger bytes."""
    return _dumps({INDEX_FIELD: list(ids)})


def decode_index(data: bytes, key: str) -> list[str]:
    """Deserialize the index record stored at ``key``.

    A ``null`` ID list decodes as an empty index.

    Raises:
        CorruptIndex: If the bytes are not an index object of string IDs
    """
    try:
        payload = _loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise CorruptIndex(f"Corrupt index record at {key!r}: {e}", key=key) from e

    if not isinstance(payload, dict):
        raise CorruptIndex(f"Corrupt index record at {key!r}: expected object", key=key)

    ids = payload.get(INDEX_FIELD)
    if ids is None:
        return []
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise CorruptIndex(
            f"Corrupt index record at {key!r}: {INDEX_FIELD!r} must be a list of strings",
            key=key,
        )
    return ids


__all__ = ["encode", "decode", "encode_index", "decode_index", "INDEX_FIELD"]
