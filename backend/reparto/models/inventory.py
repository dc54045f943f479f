from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Product(db.Model):
    """
    Product or service offered on a sale.

    Inactive products stay in the table so historical inventory lines keep
    resolving; only Active ones are listed for new sales.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    description = db.Column(db.String(255), nullable=False)

    # Whole currency units
    price = db.Column(db.Integer, nullable=False)

    updated_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=db.func.now(),
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default="Active", server_default="Active")

    owner = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "price": self.price,
            "updated_at": to_utc_z(self.updated_at),
            "user_id": self.user_id,
            "status": self.status,
        }


class InventoryLine(db.Model):
    """
    Product sold on a transaction.

    unit_cost is the price snapshot at sale time, not a live product lookup.
    """
    __tablename__ = "inventory_lines"

    transaction_id = db.Column(
        db.Integer, db.ForeignKey("transactions.id", ondelete="RESTRICT"), primary_key=True
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="RESTRICT"), primary_key=True, index=True
    )
    quantity = db.Column(db.Integer, nullable=False)
    unit_cost = db.Column(db.Integer, nullable=False)

    transaction = db.relationship("Transaction", backref=db.backref("lines", lazy=True))
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_cost": self.unit_cost,
            "line_total": self.quantity * self.unit_cost,
        }
