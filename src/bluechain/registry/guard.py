"""Uniqueness Guard - refuse to create a record over an existing one."""

from __future__ import annotations

import logging

from .errors import DuplicateID
from .store import RecordStore

logger = logging.getLogger(__name__)


def ensure_unique(store: RecordStore, supply_item_id: str) -> None:
    """Raise ``DuplicateID`` if a record already exists at ``supply_item_id``.

    Must run before any create write: check, then write.
    """
    if store.exists(supply_item_id):
        logger.warning(f"Rejected duplicate supplyItem {supply_item_id}")
        raise DuplicateID(
            f"SupplyItem {supply_item_id!r} already exists", key=supply_item_id
        )


__all__ = ["ensure_unique"]
