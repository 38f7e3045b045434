# Overview: Service-layer operations for accounts and inventory records; encapsulates business logic and database work.

"""
Account and Inventory Record Service

Accounts are keyed by email (trimmed, lower-cased). Passwords are hashed
with bcrypt. The inventory record is saved as a full replacement of the
lists the caller provides: there is no per-item patch contract, the
client re-fetches the record, mutates it and sends both lists back.
"""

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User
from ..inventory import ACTIVE_PREFIX, DELETED_PREFIX, normalize_item
from ..validation import (
    ValidationError,
    normalize_email,
    validate_inventory_fields,
    validate_signup,
)
from trainhub.time_utils import utcnow


class AccountExistsError(ValueError):
    """Raised when signing up with an email that already has an account."""
    pass


class UserNotFoundError(LookupError):
    pass


def hash_password(password: str) -> str:
    """Hash password using bcrypt (cost from BCRYPT_ROUNDS)."""
    salt = bcrypt.gensalt(rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash
        return False


def get_user(email: str) -> User | None:
    key = normalize_email(email)
    if not key:
        return None
    return db.session.query(User).filter_by(email=key).first()


def signup(name: str, email: str, password: str) -> User:
    """
    Create a new account.

    Raises:
        ValidationError: If name/email/password fail validation
        AccountExistsError: If an account already uses this email
    """
    name = (name or "").strip()
    email = normalize_email(email)
    password = (password or "").strip()

    validate_signup(name, email, password)

    if get_user(email) is not None:
        raise AccountExistsError("account already exists")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        inventory=[],
        deleted_inventory=[],
    )
    db.session.add(user)
    db.session.commit()

    current_app.logger.info("Created account %s", email)
    return user


def authenticate(email: str, password: str) -> User | None:
    """Returns the user when the credentials match, None otherwise."""
    email = normalize_email(email)
    password = (password or "").strip()
    if not email or not password:
        raise ValidationError("email and password required")

    user = get_user(email)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def _clean_entries(raw, *, prefix: str) -> list[dict]:
    if not isinstance(raw, list):
        raise ValidationError("inventory must be a list")

    cleaned = []
    for index, entry in enumerate(raw):
        if isinstance(entry, dict):
            item = normalize_item(entry, index, prefix=prefix)
            fields = validate_inventory_fields(entry)
            cleaned.append({"id": item.id, **fields})
        elif isinstance(entry, str):
            cleaned.append(normalize_item(entry, index, prefix=prefix).to_dict())
        else:
            raise ValidationError("inventory entries must be objects")
    return cleaned


def save_inventory(
    email: str,
    *,
    inventory: list | None = None,
    deleted_inventory: list | None = None,
) -> User:
    """
    Replace the user's inventory lists. Lists left as None are untouched.

    Raises:
        ValidationError: If an entry is invalid, the active list exceeds
            MAX_INVENTORY_ITEMS, or an id appears more than once
        UserNotFoundError: If no account uses this email
    """
    email = normalize_email(email)
    if not email:
        raise ValidationError("email required")

    max_items = current_app.config.get("MAX_INVENTORY_ITEMS", 1000)
    if inventory is not None and len(inventory) > max_items:
        raise ValidationError(f"inventory too large (max {max_items} items)")

    user = get_user(email)
    if user is None:
        raise UserNotFoundError("user not found")

    active = _clean_entries(inventory, prefix=ACTIVE_PREFIX) if inventory is not None else None
    deleted = (
        _clean_entries(deleted_inventory, prefix=DELETED_PREFIX)
        if deleted_inventory is not None
        else None
    )

    # An item lives in exactly one list
    final_active = active if active is not None else [i.to_dict() for i in user.inventory_items()]
    final_deleted = deleted if deleted is not None else [i.to_dict() for i in user.deleted_items()]
    seen: set[str] = set()
    for entry in final_active + final_deleted:
        if entry["id"] in seen:
            raise ValidationError(f"duplicate inventory item id: {entry['id']}")
        seen.add(entry["id"])

    if active is not None:
        user.inventory = active
    if deleted is not None:
        user.deleted_inventory = deleted
    user.updated_at = utcnow()

    db.session.commit()
    return user


def list_inventories() -> list[dict]:
    """Every account's name, email and active inventory (no credentials)."""
    users = db.session.query(User).order_by(User.email).all()
    return [
        {
            "name": u.name,
            "email": u.email,
            "inventory": [item.to_dict() for item in u.inventory_items()],
        }
        for u in users
    ]
