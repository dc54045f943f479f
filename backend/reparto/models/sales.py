from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Transaction(db.Model):
    """
    A sale to a client, recorded by a user.

    Payment components (cash, card/electronic, bot/third party) need not add
    up to total; whatever is left unpaid is carried in debt.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_created_user", "created_at", "user_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    # All amounts in whole currency units
    total = db.Column(db.Integer, nullable=False)
    cash_paid = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    card_paid = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    bot_paid = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    debt = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    lat_long = db.Column(db.String(64), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, server_default=db.func.now()
    )

    client = db.relationship("Client")
    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "user_id": self.user_id,
            "total": self.total,
            "cash_paid": self.cash_paid,
            "card_paid": self.card_paid,
            "bot_paid": self.bot_paid,
            "debt": self.debt,
            "lat_long": self.lat_long,
            "created_at": to_utc_z(self.created_at),
        }
