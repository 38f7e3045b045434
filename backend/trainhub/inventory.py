"""
Inventory item shape and legacy normalization.

Early accounts stored inventory as a list of bare strings. Those are
normalized on read into full items. Identifiers synthesized for legacy
entries are deterministic (derived from list position) so that two reads
of the same stored record agree on every id; once the record is saved
the ids are persisted and no longer depend on position.
"""
from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, replace
from typing import Any

from .validation import validate_inventory_fields


ACTIVE_PREFIX = "legacy"
DELETED_PREFIX = "legacy-deleted"


@dataclass(frozen=True)
class InventoryItem:
    id: str
    description: str
    upc: str = ""
    number: str = ""
    quantity: int = 0
    target_quantity: int = 0

    @property
    def code(self) -> str:
        return self.upc

    @property
    def need(self) -> int:
        return self.target_quantity - self.quantity

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def create(cls, payload: dict) -> "InventoryItem":
        """New item with a freshly generated id. Raises ValidationError."""
        return cls(id=uuid.uuid4().hex, **validate_inventory_fields(payload))

    def updated(self, changes: dict) -> "InventoryItem":
        merged = {**self.to_dict(), **changes}
        merged.pop("id", None)
        return replace(self, **validate_inventory_fields(merged))


def _as_count(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    try:
        count = int(value)
    except (TypeError, ValueError):
        return default
    return count if count >= 0 else default


def normalize_item(raw: Any, index: int, *, prefix: str = ACTIVE_PREFIX) -> InventoryItem:
    """Normalize one stored entry (legacy string or mapping) found at `index`."""
    position = index + 1
    if isinstance(raw, str):
        return InventoryItem(
            id=f"{prefix}-{position}",
            description=raw,
            upc=f"LEGACY-{position}",
            number=str(position),
            quantity=1,
            target_quantity=1,
        )

    if isinstance(raw, dict):
        upc = raw.get("upc")
        if upc is None:
            upc = raw.get("code")
        return InventoryItem(
            id=str(raw.get("id") or f"{prefix}-{position}"),
            description=str(raw.get("description") or raw.get("name") or ""),
            upc=str(upc or ""),
            number=str(raw.get("number") or ""),
            quantity=_as_count(raw.get("quantity")),
            target_quantity=_as_count(raw.get("target_quantity")),
        )

    raise TypeError(f"Unsupported inventory entry: {raw!r}")


def normalize_inventory(raw: Any, *, prefix: str = ACTIVE_PREFIX) -> list[InventoryItem]:
    if not raw:
        return []
    return [normalize_item(entry, i, prefix=prefix) for i, entry in enumerate(raw)]
