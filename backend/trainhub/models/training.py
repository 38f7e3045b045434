from __future__ import annotations

import uuid

from ..extensions import db
from ..lifecycle import EntityState
from trainhub.time_utils import to_utc_z, utcnow


def _new_training_id() -> str:
    return str(uuid.uuid4())


class Training(db.Model):
    """
    Authored training document.

    Soft delete: deleted_at set means the document sits in its creator's
    recycling bin. Purging removes the row.
    """
    __tablename__ = "trainings"
    __table_args__ = (
        db.Index("ix_trainings_created_by", "created_by"),
        db.Index("ix_trainings_deleted_at", "deleted_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_new_training_id)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    thumbnail_url = db.Column(db.String(512), nullable=True)

    # Ordered content blocks, order is dense 0..n-1
    blocks = db.Column(db.JSON, nullable=False, default=list)

    # Email of creator
    created_by = db.Column(db.String(254), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True)

    @property
    def state(self) -> EntityState:
        return EntityState.DELETED if self.deleted_at is not None else EntityState.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "thumbnail_url": self.thumbnail_url,
            "blocks": sorted(self.blocks or [], key=lambda b: b.get("order", 0)),
            "created_by": self.created_by,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
            "deleted_at": to_utc_z(self.deleted_at),
        }
