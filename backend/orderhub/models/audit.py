from __future__ import annotations

from ..extensions import db
from orderhub.time_utils import to_utc_z, utcnow


class AuditMixin:
    """
    Audit and soft-delete columns shared by orders, order items, items and stock.

    created_by doubles as the owner id used for "owner or admin" checks.
    updated_by / updated_date are always written together (see touch()).
    is_deleted rows are invisible to every read procedure.
    """
    created_by = db.Column(db.Integer, nullable=False)
    created_date = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_by = db.Column(db.Integer, nullable=True)
    updated_date = db.Column(db.DateTime(timezone=True), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_deleted = db.Column(db.Boolean, nullable=False, default=False, index=True)

    def touch(self, user_id: int) -> None:
        self.updated_by = user_id
        self.updated_date = utcnow()

    def soft_delete(self, user_id: int) -> None:
        self.is_deleted = True
        self.is_active = False
        self.touch(user_id)

    def audit_dict(self) -> dict:
        return {
            "created_by": self.created_by,
            "created_date": to_utc_z(self.created_date),
            "updated_by": self.updated_by,
            "updated_date": to_utc_z(self.updated_date) if self.updated_date else None,
            "is_active": self.is_active,
            "is_deleted": self.is_deleted,
        }
