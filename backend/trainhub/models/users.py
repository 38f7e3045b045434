from __future__ import annotations

from ..extensions import db
from ..inventory import ACTIVE_PREFIX, DELETED_PREFIX, normalize_inventory
from trainhub.time_utils import to_utc_z, utcnow


class User(db.Model):
    """
    Account plus its inventory record.

    The email is the account key (lower-cased on the way in). Inventory is
    stored as two JSON lists that partition every item the user has not
    purged: `inventory` (active) and `deleted_inventory` (recycling bin).
    Rows written before item objects existed may still hold bare strings;
    readers go through inventory_items()/deleted_items() which normalize.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(254), nullable=False, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    inventory = db.Column(db.JSON, nullable=False, default=list)
    deleted_inventory = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def inventory_items(self):
        return normalize_inventory(self.inventory, prefix=ACTIVE_PREFIX)

    def deleted_items(self):
        return normalize_inventory(self.deleted_inventory, prefix=DELETED_PREFIX)

    def to_principal(self) -> dict:
        return {"name": self.name, "email": self.email}

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "inventory": [item.to_dict() for item in self.inventory_items()],
            "deleted_inventory": [item.to_dict() for item in self.deleted_items()],
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
