# Overview: Service-layer operations for products; encapsulates business logic and database work.

from __future__ import annotations

from ..extensions import db
from ..models import Product, User
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    STATUS_ACTIVE,
    ValidationError,
    enforce_amounts,
    enforce_status,
    validate_payload,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"description", "price", "user_id", "status"},
    required_on_create={"description", "price", "user_id"},
)


def register_product(payload: dict) -> Product:
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    enforce_amounts(patch, ("price",))
    enforce_status(patch)
    if db.session.get(User, patch["user_id"]) is None:
        raise NotFoundError("User not found")

    product = Product(**patch)
    db.session.add(product)
    db.session.commit()
    return product


def list_products(*, active_only: bool) -> list[dict]:
    """
    Products ordered by description.

    active_only=True is the sale picker view; False includes inactive rows
    kept for historical reporting.
    """
    query = db.session.query(Product)
    if active_only:
        query = query.filter(Product.status == STATUS_ACTIVE)
    products = query.order_by(Product.description.asc(), Product.id.asc()).all()
    return [p.to_dict() for p in products]


def update_product(product_id: int, payload: dict) -> dict:
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    if not patch:
        raise ValidationError("No fields to update")
    enforce_amounts(patch, ("price",))
    enforce_status(patch)

    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    if "user_id" in patch and db.session.get(User, patch["user_id"]) is None:
        raise NotFoundError("User not found")

    for key, value in patch.items():
        setattr(product, key, value)
    db.session.commit()
    return product.to_dict()


def set_product_status(product_id: int, status) -> dict:
    patch = {"status": status}
    enforce_status(patch)
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    product.status = status
    db.session.commit()
    return product.to_dict()
