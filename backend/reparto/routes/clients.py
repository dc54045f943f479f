# Overview: Flask API routes for clients; parses input and returns JSON responses.

from flask import Blueprint, jsonify

from ..decorators import json_body, json_errors
from ..services import client_service
from ..validation import ValidationError, optional_int_arg, require_int_arg

clients_bp = Blueprint("clients", __name__)


@clients_bp.post("/register-client")
@json_errors
def register_client_route():
    payload = json_body()
    client = client_service.register_client(payload)
    return jsonify({"message": "Client registered successfully", "client_id": client.id}), 200


@clients_bp.post("/search-clients")
@json_errors
def search_clients_route():
    """
    Body: {"field": "description" | "dni" | "nombreRef", "searchText": str}
    """
    data = json_body()
    results = client_service.search_clients(data.get("field"), data.get("searchText"))
    return jsonify(results), 200


@clients_bp.post("/updateSaldo")
@json_errors
def update_saldo_route():
    """Subtract deuda from the client's balance; returns the new balance."""
    data = json_body()
    if data.get("clientId") in (None, "") or data.get("deuda") is None:
        raise ValidationError("clientId and deuda are required")
    client_id = require_int_arg(data, "clientId")
    debt = require_int_arg(data, "deuda")

    new_balance = client_service.adjust_balance(client_id, debt)
    return jsonify({"message": "Saldo updated successfully", "new_balance": new_balance}), 200


@clients_bp.post("/getLastLocation")
@json_errors
def last_location_route():
    data = json_body()
    client_id = require_int_arg(data, "clientId")
    return jsonify({"last_lat_long": client_service.get_last_location(client_id)}), 200


@clients_bp.post("/getClientData")
@json_errors
def client_data_route():
    data = json_body()
    client_id = require_int_arg(data, "clientId")
    return jsonify(client_service.get_client(client_id)), 200


@clients_bp.post("/updateClientData")
@json_errors
def update_client_data_route():
    data = json_body()
    client_id = require_int_arg(data, "clientId")
    updated = data.get("updatedData")
    if not isinstance(updated, dict) or not updated:
        raise ValidationError("clientId and updatedData are required")
    client = client_service.update_client(client_id, updated)
    return jsonify({"message": "Client data updated successfully", "client": client}), 200


@clients_bp.get("/clients")
@json_errors
def list_clients_route():
    return jsonify(client_service.list_clients()), 200


@clients_bp.put("/clients/<int:client_id>")
@json_errors
def update_client_route(client_id: int):
    payload = json_body()
    client = client_service.update_client(client_id, payload)
    return jsonify({"message": "Client updated successfully", "client": client}), 200


@clients_bp.put("/clients/<int:client_id>/status")
@json_errors
def client_status_route(client_id: int):
    payload = json_body()
    client = client_service.set_client_status(
        client_id,
        payload.get("status"),
        modified_by_user_id=optional_int_arg(payload, "modified_by_user_id"),
    )
    return jsonify({"message": "Client status updated successfully", "client": client}), 200
