# Overview: Soft-delete lifecycle shared by inventory items and training documents.

"""
Train Hub Recycling Bin Lifecycle

================================================================================
PURPOSE: Make destructive actions recoverable by default
================================================================================

STATE MACHINE:
    ACTIVE -> DELETED -> PURGED
       ^         |
       +---------+  (restore)

    ACTIVE:  Visible in the owner's lists, editable
    DELETED: In the recycling bin, hidden from lists, recoverable
    PURGED:  Gone from persisted storage, terminal

RULES:
1. ACTIVE -> PURGED is forbidden (an item must pass through the bin)
2. PURGED is terminal
3. Same-state transitions are rejected (deleting a deleted item is an error)

Training documents carry the state on the row (deleted_at). Inventory items
carry it by list membership (inventory vs deleted_inventory). Both use the
transition table below.
================================================================================
"""

from __future__ import annotations

from enum import Enum


class EntityState(str, Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"
    PURGED = "PURGED"


# Operation name -> (from_state, to_state)
OPERATIONS = {
    "remove": (EntityState.ACTIVE, EntityState.DELETED),
    "restore": (EntityState.DELETED, EntityState.ACTIVE),
    "purge": (EntityState.DELETED, EntityState.PURGED),
}

VALID_TRANSITIONS = set(OPERATIONS.values())


class LifecycleError(ValueError):
    """
    Raised when an invalid lifecycle transition is attempted.

    This is a domain error, not a technical error. It indicates
    that the user attempted an operation that violates business rules.
    """

    def __init__(self, message: str, *, current: EntityState | None = None, operation: str | None = None):
        super().__init__(message)
        self.current = current
        self.operation = operation


def can_transition(from_state: EntityState, to_state: EntityState) -> bool:
    return (EntityState(from_state), EntityState(to_state)) in VALID_TRANSITIONS


def require_transition(operation: str, current: EntityState, *, label: str = "item") -> EntityState:
    """
    Check that `operation` may run against an entity in `current` state.

    Returns the target state.

    Raises:
        LifecycleError: If the operation is unknown or not allowed from `current`
    """
    if operation not in OPERATIONS:
        raise LifecycleError(f"Unknown lifecycle operation '{operation}'", operation=operation)

    expected, target = OPERATIONS[operation]
    current = EntityState(current)
    if current != expected:
        if operation == "purge" and current == EntityState.ACTIVE:
            message = f"{label} must be in the recycling bin before it can be permanently deleted"
        elif current == EntityState.PURGED:
            message = f"{label} has been permanently deleted"
        elif operation == "remove":
            message = f"{label} is already in the recycling bin"
        else:
            message = f"{label} is not in the recycling bin"
        raise LifecycleError(message, current=current, operation=operation)

    return target
