# Overview: Inventory store: the user's item list plus its recycling bin.

"""
Inventory persistence is a single record per user holding two lists.
Every commit re-fetches the record, applies the change to a copy and
writes BOTH lists back, so the active and deleted lists always change
together.
"""
from __future__ import annotations

from ..inventory import ACTIVE_PREFIX, DELETED_PREFIX, InventoryItem, normalize_inventory
from ..validation import ValidationError
from .errors import MalformedResponseError
from .session import Principal, Session
from .softdelete import Collections, SoftDeleteStore
from .transport import Transport


def _collections(user) -> Collections:
    if not isinstance(user, dict):
        raise MalformedResponseError("Server returned an invalid response. Please try again.")
    try:
        return Collections(
            tuple(normalize_inventory(user.get("inventory"), prefix=ACTIVE_PREFIX)),
            tuple(normalize_inventory(user.get("deleted_inventory"), prefix=DELETED_PREFIX)),
        )
    except TypeError as e:
        raise MalformedResponseError("Server returned an invalid response. Please try again.") from e


class InventoryAdapter:
    label = "item"

    def __init__(self, transport: Transport):
        self.transport = transport

    def key(self, item: InventoryItem) -> str:
        return item.id

    def build(self, payload: dict, principal: Principal) -> InventoryItem:
        return InventoryItem.create(payload)

    def apply_changes(self, item: InventoryItem, changes: dict) -> InventoryItem:
        return item.updated(changes)

    def may_modify(self, item: InventoryItem, principal: Principal) -> bool:
        # the record itself is per-user
        return True

    async def load(self, principal: Principal) -> Collections:
        data = await self.transport.get("/user", {"email": principal.email})
        return _collections(data.get("user"))

    async def commit(self, principal: Principal, operation: str, item: InventoryItem, after: Collections):
        data = await self.transport.post(
            "/user",
            {
                "email": principal.email,
                "inventory": [i.to_dict() for i in after.active],
                "deleted_inventory": [i.to_dict() for i in after.deleted],
            },
        )
        committed = _collections(data["user"]) if "user" in data else after
        return committed, item


class InventoryStore(SoftDeleteStore):
    def __init__(self, transport: Transport, session: Session):
        super().__init__(InventoryAdapter(transport), session)
        self.transport = transport

    @property
    def needs_restock(self) -> list[InventoryItem]:
        return [item for item in self.active if item.need > 0]

    async def lookup_barcode(self, upc: str) -> dict:
        """Product details for prefilling the add-item form."""
        upc = (upc or "").strip()
        if not upc:
            raise ValidationError("UPC is required", "upc")
        data = await self.transport.get("/barcode-lookup", {"upc": upc})
        return data.get("product") or {}
