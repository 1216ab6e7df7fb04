from __future__ import annotations

from ..extensions import db
from orderhub.time_utils import to_utc_z, utcnow


class Login(db.Model):
    """
    Credential records for authentication.

    Username and email are globally unique. Rows are soft-deleted;
    authentication only considers is_active=True and is_deleted=False.

    Bcrypt hashed password is stored in password_hash and never leaves the
    credential verifier.
    """
    __tablename__ = "logins"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_logins_username"),
        db.UniqueConstraint("email", name="uq_logins_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(100), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_deleted = db.Column(db.Boolean, nullable=False, default=False)

    created_date = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "is_admin": self.is_admin,
            "is_active": self.is_active,
            "created_date": to_utc_z(self.created_date),
        }

    def to_credentials(self) -> dict:
        """Identity-store row, including the hash. Only the credential lookup procedure emits this."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "password_hash": self.password_hash,
            "role": "Admin" if self.is_admin else "User",
            "is_active": self.is_active,
            "is_deleted": self.is_deleted,
        }
