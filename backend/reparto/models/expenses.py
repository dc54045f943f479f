from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Expense(db.Model):
    """Cash outflow ("egreso") paid by a user, e.g. fuel or mechanic."""
    __tablename__ = "expenses"
    __table_args__ = (
        db.Index("ix_expenses_created_user", "created_at", "user_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, server_default=db.func.now()
    )
    category = db.Column(db.String(64), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    amount = db.Column(db.Integer, nullable=False)

    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": to_utc_z(self.created_at),
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
        }
