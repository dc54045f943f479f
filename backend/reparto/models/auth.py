from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class User(db.Model):
    """
    Employee accounts for login and attribution.

    hierarchy is an integer role rank (1 = administrator). Users are never
    deleted; status flips between Active and Inactive.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    hierarchy = db.Column(db.Integer, nullable=False)
    username = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    dni = db.Column(db.String(32), nullable=True)
    phone = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    status = db.Column(db.String(16), nullable=False, default="Active", server_default="Active")
    status_changed_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, server_default=db.func.now()
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "hierarchy": self.hierarchy,
            "username": self.username,
            "name": self.name,
            "dni": self.dni,
            "phone": self.phone,
            "email": self.email,
            "status": self.status,
            "status_changed_at": to_utc_z(self.status_changed_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.id} {self.username}>"
