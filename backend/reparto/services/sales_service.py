# Overview: Service-layer operations for sales transactions and their inventory lines.

"""
Transactions and inventory lines.

Listing functions take a half-open [start, end) window and an optional
user filter. They are also the building blocks of the consolidated report,
so their output shape is shared with the HTTP listings.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func

from ..extensions import db
from ..models import InventoryLine, Product, Transaction
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    ValidationError,
    enforce_amounts,
    require_int_arg,
    validate_payload,
)

TRANSACTION_POLICY = ModelValidationPolicy(
    writable_fields={
        "client_id", "user_id", "total", "cash_paid", "card_paid", "bot_paid", "debt", "lat_long",
    },
    required_on_create={"client_id", "user_id", "total"},
)

PAYMENT_FIELDS = ("total", "cash_paid", "card_paid", "bot_paid", "debt")


def register_transaction(payload: dict) -> Transaction:
    """
    Insert a sale. Referential integrity (client and user exist) is left to
    the foreign keys; a dangling id surfaces as a storage error.
    """
    patch = validate_payload(model=Transaction, payload=payload, policy=TRANSACTION_POLICY, partial=False)
    enforce_amounts(patch, PAYMENT_FIELDS)

    transaction = Transaction(**patch)
    db.session.add(transaction)
    db.session.commit()
    return transaction


def register_inventory_line(payload: dict) -> InventoryLine:
    """Attach quantity x product to a transaction. All four fields are integers."""
    payload = payload or {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    line = InventoryLine(
        transaction_id=require_int_arg(payload, "transaction_id"),
        product_id=require_int_arg(payload, "product_id"),
        quantity=require_int_arg(payload, "quantity"),
        unit_cost=require_int_arg(payload, "unit_cost"),
    )
    enforce_amounts({"quantity": line.quantity, "unit_cost": line.unit_cost}, ("quantity", "unit_cost"))

    existing = db.session.get(InventoryLine, (line.transaction_id, line.product_id))
    if existing is not None:
        raise ConflictError("Product already registered on this transaction")

    db.session.add(line)
    db.session.commit()
    return line


def _transactions_query(start: datetime, end: datetime, user_id: int | None):
    query = db.session.query(Transaction).filter(
        Transaction.created_at >= start,
        Transaction.created_at < end,
    )
    if user_id is not None:
        query = query.filter(Transaction.user_id == user_id)
    return query


def list_transactions(start: datetime, end: datetime, user_id: int | None = None) -> list[dict]:
    rows = _transactions_query(start, end, user_id).order_by(Transaction.created_at.asc(), Transaction.id.asc()).all()
    return [t.to_dict() for t in rows]


def list_inventory(start: datetime, end: datetime, user_id: int | None = None) -> list[dict]:
    """Inventory lines of transactions in the window, with product description."""
    query = (
        db.session.query(InventoryLine, Product.description)
        .join(Transaction, InventoryLine.transaction_id == Transaction.id)
        .join(Product, InventoryLine.product_id == Product.id)
        .filter(Transaction.created_at >= start, Transaction.created_at < end)
    )
    if user_id is not None:
        query = query.filter(Transaction.user_id == user_id)

    rows = query.order_by(InventoryLine.transaction_id.asc(), InventoryLine.product_id.asc()).all()
    items = []
    for line, description in rows:
        item = line.to_dict()
        item["product_description"] = description
        items.append(item)
    return items


def inventory_summary(start: datetime, end: datetime, user_id: int | None = None) -> list[dict]:
    """Units and value sold per product over the window."""
    query = (
        db.session.query(
            Product.id.label("product_id"),
            Product.description.label("description"),
            func.coalesce(func.sum(InventoryLine.quantity), 0).label("quantity"),
            func.coalesce(func.sum(InventoryLine.quantity * InventoryLine.unit_cost), 0).label("total_value"),
        )
        .join(InventoryLine, InventoryLine.product_id == Product.id)
        .join(Transaction, InventoryLine.transaction_id == Transaction.id)
        .filter(Transaction.created_at >= start, Transaction.created_at < end)
    )
    if user_id is not None:
        query = query.filter(Transaction.user_id == user_id)

    rows = query.group_by(Product.id, Product.description).order_by(Product.description.asc()).all()
    return [
        {
            "product_id": row.product_id,
            "description": row.description,
            "quantity": int(row.quantity or 0),
            "total_value": int(row.total_value or 0),
        }
        for row in rows
    ]
