"""SupplyItem record and schema variants."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

# Default reserved ledger key holding the SupplyItem index
INDEX_KEY = "supplyItemIDs"


@dataclass(slots=True)
class SupplyItem:
    """A single supply item record.

    All attributes are opaque strings; coordinates and quantities are stored
    exactly as supplied. ``ownerID`` stays empty when the deployment does not
    track ownership.
    """

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

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(SupplyItem))


@dataclass(frozen=True, slots=True)
class SchemaVariant:
    """Positional create layout for a deployed record schema.

    The ownership-tracking variant takes ``ownerID`` as the fourth create
    argument and enables ownership transfer and owner-filtered listing.
    """

    track_ownership: bool = True

    @property
    def create_fields(self) -> tuple[str, ...]:
        if self.track_ownership:
            return FIELD_NAMES
        return tuple(name for name in FIELD_NAMES if name != "ownerID")

    @property
    def create_arity(self) -> int:
        return len(self.create_fields)

    def build_item(self, args: list[str]) -> SupplyItem:
        """Build a SupplyItem from positional create arguments.

        The caller is responsible for checking ``len(args)`` first.
        """
        return SupplyItem(**dict(zip(self.create_fields, args)))

    def create_args(self, item: SupplyItem) -> list[str]:
        """Inverse of ``build_item``: the positional args that create ``item``."""
        return [getattr(item, name) for name in self.create_fields]


OWNERSHIP_SCHEMA = SchemaVariant(track_ownership=True)
LEGACY_SCHEMA = SchemaVariant(track_ownership=False)


__all__ = [
    "INDEX_KEY",
    "SupplyItem",
    "FIELD_NAMES",
    "SchemaVariant",
    "OWNERSHIP_SCHEMA",
    "LEGACY_SCHEMA",
]
