from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Client(db.Model):
    """
    Customer with a running balance ("saldo").

    balance is signed: positive is credit held for the client, negative is
    debt owed to the business. It only changes through explicit adjustment
    (see client_service.adjust_balance) or a full record update.
    """
    __tablename__ = "clients"
    __table_args__ = (
        db.Index("ix_clients_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    description = db.Column(db.String(255), nullable=False)
    reference_name = db.Column(db.String(255), nullable=True)
    reference_dni = db.Column(db.String(32), nullable=True)
    phone = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    address = db.Column(db.String(255), nullable=True)

    # Free text "lat,long" captured by the delivery app
    last_lat_long = db.Column(db.String(64), nullable=True)

    modified_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=db.func.now(),
    )
    balance = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    status = db.Column(db.String(16), nullable=False, default="Active", server_default="Active")
    modified_by_user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    version_id = db.Column(db.Integer, nullable=False, default=1, server_default="1")

    modified_by = db.relationship("User")
    __mapper_args__ = {"version_id_col": version_id}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "reference_name": self.reference_name,
            "reference_dni": self.reference_dni,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "last_lat_long": self.last_lat_long,
            "modified_at": to_utc_z(self.modified_at),
            "balance": self.balance,
            "status": self.status,
            "modified_by_user_id": self.modified_by_user_id,
            "version_id": self.version_id,
        }
