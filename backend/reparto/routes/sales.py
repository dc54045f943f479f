# Overview: Flask API routes for sales transactions and inventory lines.

from flask import Blueprint, jsonify, request

from ..decorators import json_body, json_errors
from ..services import sales_service
from ..services.reporting_service import resolve_window
from ..validation import optional_int_arg

sales_bp = Blueprint("sales", __name__)


def window_from_args():
    """(start, end, user_id) from startDate/endDate/UserID query args; default today."""
    start, end = resolve_window(
        start_date=request.args.get("startDate"),
        end_date=request.args.get("endDate"),
    )
    return start, end, optional_int_arg(request.args, "UserID")


@sales_bp.post("/registerTransaction")
@json_errors
def register_transaction_route():
    payload = json_body()
    transaction = sales_service.register_transaction(payload)
    return jsonify({"transaction_id": transaction.id}), 200


@sales_bp.post("/registerInventory")
@json_errors
def register_inventory_route():
    """
    Body: {"transaction_id", "product_id", "quantity", "unit_cost"}

    Numeric strings are accepted; anything that does not parse as an
    integer is a 400.
    """
    payload = json_body()
    sales_service.register_inventory_line(payload)
    return jsonify({"message": "Inventory updated successfully"}), 200


@sales_bp.get("/transactions")
@json_errors
def list_transactions_route():
    start, end, user_id = window_from_args()
    return jsonify(sales_service.list_transactions(start, end, user_id)), 200


@sales_bp.get("/inventory")
@json_errors
def list_inventory_route():
    start, end, user_id = window_from_args()
    return jsonify(sales_service.list_inventory(start, end, user_id)), 200


@sales_bp.get("/inventory-summary")
@json_errors
def inventory_summary_route():
    start, end, user_id = window_from_args()
    return jsonify(sales_service.inventory_summary(start, end, user_id)), 200
