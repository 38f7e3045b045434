# Overview: Service-layer operations for training documents; encapsulates business logic and database work.

"""
Training Document Service

Soft delete follows trainhub.lifecycle:
    ACTIVE --delete--> DELETED --permanent delete--> (row removed)
       ^                  |
       +-----restore------+

Only the creator (created_by) may update, delete, restore or purge a
document. Active documents are visible to every signed-in user; deleted
documents are only listed in their creator's recycling bin.
"""

from __future__ import annotations

from ..blocks import normalize_blocks
from ..extensions import db
from ..lifecycle import EntityState, LifecycleError, require_transition
from ..models import Training
from ..validation import ValidationError, normalize_email, validate_training_fields
from trainhub.time_utils import utcnow


class TrainingNotFoundError(LookupError):
    pass


class OwnershipError(PermissionError):
    """Raised when someone other than the creator modifies a training."""
    pass


def _get_or_raise(training_id: str) -> Training:
    if not training_id:
        raise ValidationError("id required")
    training = db.session.get(Training, training_id)
    if training is None:
        raise TrainingNotFoundError("training not found")
    return training


def _require_owner(training: Training, email: str, action: str) -> None:
    if training.created_by != normalize_email(email):
        raise OwnershipError(f"you can only {action} your own trainings")


def list_active() -> list[Training]:
    return (
        db.session.query(Training)
        .filter(Training.deleted_at.is_(None))
        .order_by(Training.created_at.desc(), Training.id)
        .all()
    )


def list_deleted(email: str) -> list[Training]:
    """The recycling bin for one creator, most recently deleted first."""
    email = normalize_email(email)
    if not email:
        raise ValidationError("email required")
    return (
        db.session.query(Training)
        .filter(Training.deleted_at.isnot(None), Training.created_by == email)
        .order_by(Training.deleted_at.desc(), Training.id)
        .all()
    )


def get_training(training_id: str) -> Training:
    return _get_or_raise(training_id)


def create_training(
    *,
    created_by: str,
    title: str,
    description: str | None = None,
    thumbnail_url: str | None = None,
    blocks: list | None = None,
) -> Training:
    created_by = normalize_email(created_by)
    if not created_by:
        raise ValidationError("email required")

    now = utcnow()
    training = Training(
        title=validate_training_fields(title),
        description=(description or "").strip(),
        thumbnail_url=thumbnail_url or None,
        blocks=normalize_blocks(blocks),
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )
    db.session.add(training)
    db.session.commit()
    return training


def update_training(
    training_id: str,
    *,
    email: str,
    title: str | None = None,
    description: str | None = None,
    thumbnail_url: str | None = None,
    blocks: list | None = None,
) -> Training:
    """
    Patch a training. Fields passed as None are left unchanged, so an
    empty description or thumbnail_url clears it. `blocks`, when given,
    replaces the whole block list.

    Deleted trainings cannot be edited until restored.
    """
    training = _get_or_raise(training_id)
    _require_owner(training, email, "update")

    if training.state != EntityState.ACTIVE:
        raise LifecycleError(
            "training is in the recycling bin; restore it before editing",
            current=training.state,
        )

    if title is not None:
        training.title = validate_training_fields(title)
    if description is not None:
        training.description = description.strip()
    if thumbnail_url is not None:
        training.thumbnail_url = thumbnail_url
    if blocks is not None:
        training.blocks = normalize_blocks(blocks)
    training.updated_at = utcnow()

    db.session.commit()
    return training


def delete_training(training_id: str, *, email: str) -> Training:
    """Soft delete: move an active training to its creator's recycling bin."""
    training = _get_or_raise(training_id)
    _require_owner(training, email, "delete")
    require_transition("remove", training.state, label="training")

    now = utcnow()
    training.deleted_at = now
    training.updated_at = now

    db.session.commit()
    return training


def restore_training(training_id: str, *, email: str) -> Training:
    training = _get_or_raise(training_id)
    _require_owner(training, email, "restore")
    require_transition("restore", training.state, label="training")

    training.deleted_at = None
    training.updated_at = utcnow()

    db.session.commit()
    return training


def purge_training(training_id: str, *, email: str) -> None:
    """Permanent delete. Only reachable from the recycling bin."""
    training = _get_or_raise(training_id)
    _require_owner(training, email, "delete")
    require_transition("purge", training.state, label="training")

    db.session.delete(training)
    db.session.commit()


def empty_bin(email: str) -> int:
    """Purge every training in a creator's recycling bin. Returns the count."""
    trainings = list_deleted(email)
    for training in trainings:
        db.session.delete(training)
    db.session.commit()
    return len(trainings)
