# Overview: Flask API routes for expenses ("egresos").

from flask import Blueprint, jsonify

from ..decorators import json_body, json_errors
from ..services import expense_service
from .sales import window_from_args

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.post("/add-egreso")
@json_errors
def add_expense_route():
    payload = json_body()
    expense = expense_service.add_expense(payload)
    return jsonify({"message": "Expense registered successfully", "expense_id": expense.id}), 200


@expenses_bp.get("/expenses")
@json_errors
def list_expenses_route():
    start, end, user_id = window_from_args()
    return jsonify(expense_service.list_expenses(start, end, user_id)), 200
