"""
Input validation shared by the API routes and the client stores.

The client runs the same checks before issuing a request, so a
ValidationError never costs a network round trip.
"""
from __future__ import annotations

from typing import Any


MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128
MAX_TITLE_LENGTH = 200


class ValidationError(ValueError):
    """400-level input problem."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


def normalize_email(email: str | None) -> str:
    """Emails are the account key: trimmed and case-insensitive."""
    return (email or "").strip().lower()


def _is_valid_email_char(ch: str) -> bool:
    return ch.isalnum() or ch in ".@-_+"


def is_valid_email(email: str) -> bool:
    if len(email) < 3 or len(email) > 254:
        return False

    parts = email.split("@")
    if len(parts) != 2:
        return False

    local, domain = parts
    if not local or len(local) > 64:
        return False
    if not domain or len(domain) > 253:
        return False
    if "." not in domain:
        return False

    return all(_is_valid_email_char(ch) for ch in email)


def validate_password(password: str | None) -> None:
    if not password:
        raise ValidationError("password is required", "password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"password must be at least {MIN_PASSWORD_LENGTH} characters", "password"
        )
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationError(
            f"password must be less than {MAX_PASSWORD_LENGTH} characters", "password"
        )


def validate_signup(name: str, email: str, password: str) -> None:
    """
    Validate signup input. Expects name/email already trimmed and the
    email lower-cased (see normalize_email).
    """
    if not name:
        raise ValidationError("name is required", "name")
    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters", "name"
        )
    if not email:
        raise ValidationError("email is required", "email")
    if not is_valid_email(email):
        raise ValidationError("invalid email format", "email")
    validate_password(password)


def coerce_non_negative_int(field: str, value: Any) -> int:
    """
    Strict integer coercion: rejects bools, floats, decimals and
    scientific notation, accepts ints and plain digit strings.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field)
    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal", field)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer", field)
        if "e" in stripped.lower():
            raise ValidationError(
                f"{field} must be a plain integer (scientific notation not allowed)", field
            )
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)", field)
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer", field)
    else:
        raise ValidationError(f"{field} must be an integer", field)

    if result < 0:
        raise ValidationError(f"{field} must be >= 0", field)
    return result


def validate_inventory_fields(payload: dict) -> dict:
    """
    Validate + normalize an inventory item payload.

    Returns a cleaned dict with description/upc/number as trimmed strings
    and quantity/target_quantity as non-negative ints. `code` is accepted
    as an alias of `upc`.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid inventory item")

    description = str(payload.get("description") or "").strip()
    if not description:
        raise ValidationError("description is required", "description")

    upc = payload.get("upc")
    if upc is None:
        upc = payload.get("code")

    return {
        "description": description,
        "upc": str(upc or "").strip(),
        "number": str(payload.get("number") or "").strip(),
        "quantity": coerce_non_negative_int("quantity", payload.get("quantity", 0)),
        "target_quantity": coerce_non_negative_int(
            "target_quantity", payload.get("target_quantity", 0)
        ),
    }


def validate_training_fields(title: str | None, *, required: bool = True) -> str:
    """Returns the trimmed title."""
    title = (title or "").strip()
    if required and not title:
        raise ValidationError("title is required", "title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(
            f"title too long (max {MAX_TITLE_LENGTH} characters)", "title"
        )
    return title
