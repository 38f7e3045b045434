# Overview: Generic recycling-bin store shared by inventory items and trainings.

"""
SoftDeleteStore

One store per entity kind, parameterized by an adapter that knows how to
load, build and persist that kind. Every mutating operation:

1. takes the store lock (operations commit in the order they were issued)
2. re-loads the authoritative collections from the server
3. locates the target and checks ownership and the lifecycle transition
4. asks the adapter to persist the change
5. publishes the collections the adapter reports back as the new snapshot

Nothing is applied locally before step 5. If any step fails the snapshot
and generation are left exactly as they were.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Protocol, TypeVar

from ..lifecycle import EntityState, LifecycleError, require_transition
from .errors import NotFoundError, OwnershipError, TransitionError
from .session import Principal, Session


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Collections(Generic[T]):
    active: tuple = field(default_factory=tuple)
    deleted: tuple = field(default_factory=tuple)

    def locate(self, key_of, ref: str) -> tuple[EntityState, Any]:
        for item in self.active:
            if key_of(item) == ref:
                return EntityState.ACTIVE, item
        for item in self.deleted:
            if key_of(item) == ref:
                return EntityState.DELETED, item
        raise KeyError(ref)

    def apply(self, key_of, operation: str, item) -> "Collections[T]":
        """Collections after `operation` on `item`."""
        key = key_of(item)
        active = tuple(i for i in self.active if key_of(i) != key)
        deleted = tuple(i for i in self.deleted if key_of(i) != key)

        if operation == "add":
            return Collections(self.active + (item,), self.deleted)
        if operation == "update":
            return Collections(tuple(item if key_of(i) == key else i for i in self.active), self.deleted)
        if operation == "remove":
            return Collections(active, deleted + (item,))
        if operation == "restore":
            return Collections(active + (item,), deleted)
        if operation == "purge":
            return Collections(self.active, deleted)
        raise ValueError(f"unknown operation {operation!r}")


class Adapter(Protocol[T]):
    label: str

    def key(self, item: T) -> str: ...

    def build(self, payload: dict, principal: Principal) -> T: ...

    def apply_changes(self, item: T, changes: dict) -> T: ...

    def may_modify(self, item: T, principal: Principal) -> bool: ...

    async def load(self, principal: Principal) -> Collections[T]: ...

    async def commit(
        self, principal: Principal, operation: str, item: T, after: Collections[T]
    ) -> tuple[Collections[T], T]: ...


class SoftDeleteStore(Generic[T]):
    def __init__(self, adapter: Adapter, session: Session):
        self.adapter = adapter
        self.session = session
        self.snapshot: Collections = Collections()
        self.generation = 0
        self._lock = asyncio.Lock()

    @property
    def active(self) -> tuple:
        return self.snapshot.active

    @property
    def deleted(self) -> tuple:
        return self.snapshot.deleted

    def _publish(self, collections: Collections) -> None:
        self.snapshot = collections
        self.generation += 1

    async def refresh(self) -> Collections:
        async with self._lock:
            principal = self.session.require_user()
            self._publish(await self.adapter.load(principal))
            return self.snapshot

    def _locate(self, current: Collections, ref: str):
        try:
            return current.locate(self.adapter.key, ref)
        except KeyError:
            raise NotFoundError(f"{self.adapter.label} not found", code="not_found") from None

    def _check(self, operation: str, state: EntityState, item, principal: Principal) -> None:
        if not self.adapter.may_modify(item, principal):
            raise OwnershipError(
                f"you can only {operation} your own {self.adapter.label}s", code="forbidden"
            )
        if operation == "update":
            if state != EntityState.ACTIVE:
                raise TransitionError(
                    f"restore the {self.adapter.label} before editing it", code="lifecycle"
                )
            return
        try:
            require_transition(operation, state, label=self.adapter.label)
        except LifecycleError as e:
            raise TransitionError(str(e), code="lifecycle") from e

    async def _commit(self, principal: Principal, operation: str, current: Collections, item):
        after = current.apply(self.adapter.key, operation, item)
        committed, result = await self.adapter.commit(principal, operation, item, after)
        self._publish(committed)
        logger.info("%s %s %s", operation, self.adapter.label, self.adapter.key(result))
        return result

    async def add(self, payload: dict):
        """Validate and persist a new entity. Raises ValidationError before any request."""
        principal = self.session.require_user()
        item = self.adapter.build(payload, principal)
        async with self._lock:
            current = await self.adapter.load(principal)
            return await self._commit(principal, "add", current, item)

    async def update(self, ref: str, changes: dict):
        principal = self.session.require_user()
        async with self._lock:
            current = await self.adapter.load(principal)
            state, item = self._locate(current, ref)
            self._check("update", state, item, principal)
            updated = self.adapter.apply_changes(item, changes)
            return await self._commit(principal, "update", current, updated)

    async def _transition(self, operation: str, ref: str):
        principal = self.session.require_user()
        async with self._lock:
            current = await self.adapter.load(principal)
            state, item = self._locate(current, ref)
            self._check(operation, state, item, principal)
            return await self._commit(principal, operation, current, item)

    async def remove(self, ref: str):
        """Move an active entity to the recycling bin."""
        return await self._transition("remove", ref)

    async def restore(self, ref: str):
        return await self._transition("restore", ref)

    async def purge(self, ref: str):
        """Permanently delete an entity that is already in the recycling bin."""
        return await self._transition("purge", ref)

    def find(self, ref: str) -> Optional[Any]:
        """Look `ref` up in the current snapshot (no request)."""
        try:
            return self.snapshot.locate(self.adapter.key, ref)[1]
        except KeyError:
            return None
