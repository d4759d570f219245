"""Ownership Filter - disclose records only to their owner."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from . import codec
from .errors import PermissionDenied
from .models import SupplyItem


def ensure_owner(item: SupplyItem, caller_id: str) -> None:
    """Raise ``PermissionDenied`` unless ``caller_id`` owns ``item``."""
    if item.ownerID != caller_id:
        # Never echo the stored owner or any other record contents
        raise PermissionDenied(
            f"Permission denied for caller {caller_id!r}", key=item.supplyItemID
        )


def reveal(item: SupplyItem, caller_id: str) -> bytes:
    """Return the encoded record if ``caller_id`` owns it.

    Raises:
        PermissionDenied: If the caller is not the recorded owner
    """
    ensure_owner(item, caller_id)
    return codec.encode(item)


def visible(items: Iterable[SupplyItem], caller_id: str) -> Iterator[bytes]:
    """Yield the encoded records ``caller_id`` may see, in input order."""
    for item in items:
        try:
            yield reveal(item, caller_id)
        except PermissionDenied:
            continue


__all__ = ["ensure_owner", "reveal", "visible"]
