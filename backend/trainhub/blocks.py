"""
Training content blocks.

A training document is an ordered list of blocks. `order` is always a
dense 0..n-1 sequence: every helper here that changes membership or
position returns a renumbered copy rather than mutating its input.
"""
from __future__ import annotations

import uuid
from typing import Any

from .validation import ValidationError


BLOCK_TYPES = ("title", "text", "video", "image", "code", "list", "quote", "divider")

# type -> {content key: expected python type}
REQUIRED_CONTENT = {
    "title": {"text": str},
    "text": {"text": str},
    "video": {"url": str},
    "image": {"url": str},
    "code": {"code": str},
    "list": {"items": list},
    "quote": {"text": str},
    "divider": {},
}

OPTIONAL_CONTENT = {
    "image": {"alt": str},
    "code": {"language": str},
    "list": {"ordered": bool},
    "quote": {"author": str},
}


def new_block_id() -> str:
    return uuid.uuid4().hex


def _check_content(block_type: str, content: Any) -> dict:
    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ValidationError(f"{block_type} block content must be an object", "blocks")

    cleaned: dict = {}
    for key, expected in REQUIRED_CONTENT[block_type].items():
        if key not in content:
            raise ValidationError(f"{block_type} block requires '{key}'", "blocks")
        if not isinstance(content[key], expected):
            raise ValidationError(f"{block_type} block '{key}' has the wrong type", "blocks")
        cleaned[key] = content[key]

    for key, expected in OPTIONAL_CONTENT.get(block_type, {}).items():
        if content.get(key) is not None:
            if not isinstance(content[key], expected):
                raise ValidationError(f"{block_type} block '{key}' has the wrong type", "blocks")
            cleaned[key] = content[key]

    if block_type == "list" and not all(isinstance(i, str) for i in cleaned["items"]):
        raise ValidationError("list block items must be strings", "blocks")

    return cleaned


def make_block(block_type: str, content: dict | None = None, *, block_id: str | None = None, order: int = 0) -> dict:
    if block_type not in BLOCK_TYPES:
        raise ValidationError(
            f"Invalid block type '{block_type}'. Must be one of: {', '.join(BLOCK_TYPES)}", "blocks"
        )
    return {
        "id": block_id or new_block_id(),
        "type": block_type,
        "order": order,
        "content": _check_content(block_type, content),
    }


def renumber(blocks: list[dict]) -> list[dict]:
    """Copies of `blocks` in list order with order = 0..n-1."""
    return [{**block, "order": i} for i, block in enumerate(blocks)]


def normalize_blocks(raw: Any) -> list[dict]:
    """
    Validate a client-supplied block list, sort by its `order` values
    (stable for ties) and renumber densely.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("blocks must be a list", "blocks")

    parsed = []
    for position, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError("each block must be an object", "blocks")
        order = item.get("order", position)
        if isinstance(order, bool) or not isinstance(order, int):
            raise ValidationError("block order must be an integer", "blocks")
        parsed.append(
            make_block(
                item.get("type"),
                item.get("content"),
                block_id=str(item["id"]) if item.get("id") else None,
                order=order,
            )
        )

    parsed.sort(key=lambda b: b["order"])
    return renumber(parsed)


def _index_of(blocks: list[dict], block_id: str) -> int:
    for i, block in enumerate(blocks):
        if block["id"] == block_id:
            return i
    raise KeyError(block_id)


def move_block(blocks: list[dict], block_id: str, new_index: int) -> list[dict]:
    """Move a block to `new_index` (clamped to the list bounds)."""
    ordered = sorted(blocks, key=lambda b: b["order"])
    block = ordered.pop(_index_of(ordered, block_id))
    new_index = max(0, min(new_index, len(ordered)))
    ordered.insert(new_index, block)
    return renumber(ordered)


def remove_block(blocks: list[dict], block_id: str) -> list[dict]:
    ordered = sorted(blocks, key=lambda b: b["order"])
    ordered.pop(_index_of(ordered, block_id))
    return renumber(ordered)
