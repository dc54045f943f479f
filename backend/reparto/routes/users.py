# Overview: Flask API routes for user administration.

from flask import Blueprint, jsonify

from ..decorators import json_body, json_errors
from ..services import user_service

users_bp = Blueprint("users", __name__)


@users_bp.get("/users")
@json_errors
def list_users_route():
    """Active users for pickers: [{id, name}]."""
    return jsonify(user_service.list_users()), 200


@users_bp.get("/user-management")
@json_errors
def user_management_route():
    return jsonify(user_service.list_user_management()), 200


@users_bp.put("/user-management/update/<int:user_id>")
@json_errors
def update_user_route(user_id: int):
    payload = json_body()
    user = user_service.update_user(user_id, payload)
    return jsonify({"message": "User updated successfully", "user": user}), 200


@users_bp.put("/user-management/status/<int:user_id>")
@json_errors
def user_status_route(user_id: int):
    payload = json_body()
    user = user_service.set_user_status(user_id, payload.get("status"))
    return jsonify({"message": "User status updated successfully", "user": user}), 200


@users_bp.put("/user-management/password/<int:user_id>")
@json_errors
def user_password_route(user_id: int):
    payload = json_body()
    user_service.update_user_password(user_id, payload.get("password"))
    return jsonify({"message": "Password updated successfully"}), 200
