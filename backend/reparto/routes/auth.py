# Overview: Flask API routes for login and user registration.

from flask import Blueprint, jsonify, request

from ..decorators import json_body, json_errors
from ..services import auth_service
from ..validation import ValidationError

auth_bp = Blueprint("auth", __name__)


@auth_bp.get("/login")
@json_errors
def login_route():
    """
    Validate Username/Password query parameters.

    Returns the user profile (never the password hash) on success.
    """
    username = request.args.get("Username")
    password = request.args.get("Password")
    if not username or not password:
        raise ValidationError("Username and Password are required")

    user = auth_service.authenticate(username, password)
    return jsonify({"message": "Login successful", "user": user.to_dict()}), 200


@auth_bp.post("/register")
@json_errors
def register_route():
    payload = json_body()
    user = auth_service.register_user(payload)
    return jsonify({"message": "User registered successfully", "user_id": user.id}), 200
