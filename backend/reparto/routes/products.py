# Overview: Flask API routes for products operations; parses input and returns JSON responses.

from flask import Blueprint, jsonify

from ..decorators import json_body, json_errors
from ..services import products_service

products_bp = Blueprint("products", __name__)


@products_bp.post("/register-product")
@json_errors
def register_product_route():
    payload = json_body()
    product = products_service.register_product(payload)
    return jsonify({"message": "Product/Service registered successfully", "product_id": product.id}), 200


@products_bp.get("/products")
@json_errors
def list_active_products_route():
    """Products offered for new sales (status Active)."""
    return jsonify(products_service.list_products(active_only=True)), 200


@products_bp.get("/products/all")
@json_errors
def list_all_products_route():
    return jsonify(products_service.list_products(active_only=False)), 200


@products_bp.patch("/update-product/<int:product_id>")
@json_errors
def update_product_route(product_id: int):
    payload = json_body()
    product = products_service.update_product(product_id, payload)
    return jsonify({"message": "Product updated successfully", "product": product}), 200


@products_bp.patch("/update-product-status/<int:product_id>")
@json_errors
def product_status_route(product_id: int):
    payload = json_body()
    product = products_service.set_product_status(product_id, payload.get("status"))
    return jsonify({"message": "Product status updated successfully", "product": product}), 200
