# Overview: Service-layer operations for clients; encapsulates business logic and database work.

"""
Client roster and balance ("saldo") management.

Balance adjustments are a single UPDATE (balance = balance - debt), so two
concurrent adjustments to the same client both land instead of one
overwriting the other.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Client, User
from ..time_utils import utcnow
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    enforce_amounts,
    enforce_status,
    validate_payload,
)

CLIENT_POLICY = ModelValidationPolicy(
    writable_fields={
        "description", "reference_name", "reference_dni", "phone", "email",
        "address", "last_lat_long", "balance", "status", "modified_by_user_id",
    },
    required_on_create={"description", "modified_by_user_id"},
)

# search field name -> searchable column
SEARCH_FIELDS = {
    "description": Client.description,
    "dni": Client.reference_dni,
    "nombreRef": Client.reference_name,
}


def _get_client(client_id: int) -> Client:
    client = db.session.get(Client, client_id)
    if client is None:
        raise NotFoundError("Client not found")
    return client


def _require_user(user_id: int) -> None:
    if db.session.get(User, user_id) is None:
        raise NotFoundError("User not found")


def register_client(payload: dict) -> Client:
    patch = validate_payload(model=Client, payload=payload, policy=CLIENT_POLICY, partial=False)
    enforce_amounts(patch, ("balance",), allow_negative=True)
    enforce_status(patch)
    _require_user(patch["modified_by_user_id"])

    client = Client(**patch)
    db.session.add(client)
    db.session.commit()
    return client


def search_clients(field: str, text) -> list[dict]:
    """
    Substring match on one of description, dni or nombreRef.

    LIKE wildcards typed by the user are matched literally.
    """
    column = SEARCH_FIELDS.get(field)
    if column is None:
        raise ValidationError("Invalid search field")

    text = "" if text is None else str(text)
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    clients = (
        db.session.query(Client)
        .filter(column.like(f"%{escaped}%", escape="\\"))
        .order_by(Client.description.asc(), Client.id.asc())
        .all()
    )
    return [c.to_dict() for c in clients]


def list_clients() -> list[dict]:
    clients = db.session.query(Client).order_by(Client.id.asc()).all()
    return [c.to_dict() for c in clients]


def get_client(client_id: int) -> dict:
    return _get_client(client_id).to_dict()


def get_last_location(client_id: int) -> str | None:
    client = db.session.get(Client, client_id)
    if client is None:
        return None
    return client.last_lat_long


def update_client(client_id: int, payload: dict) -> dict:
    client = _get_client(client_id)
    patch = validate_payload(model=Client, payload=payload, policy=CLIENT_POLICY, partial=True)
    if not patch:
        raise ValidationError("No fields to update")
    enforce_amounts(patch, ("balance",), allow_negative=True)
    enforce_status(patch)
    if patch.get("modified_by_user_id") is not None:
        _require_user(patch["modified_by_user_id"])

    for key, value in patch.items():
        setattr(client, key, value)
    db.session.commit()
    return client.to_dict()


def set_client_status(client_id: int, status, modified_by_user_id: int | None = None) -> dict:
    patch = {"status": status}
    enforce_status(patch)
    client = _get_client(client_id)
    client.status = status
    if modified_by_user_id is not None:
        _require_user(modified_by_user_id)
        client.modified_by_user_id = modified_by_user_id
    db.session.commit()
    return client.to_dict()


def adjust_balance(client_id: int, debt: int) -> int:
    """
    Subtract debt from the client's balance and return the new balance.

    A negative debt credits the client. Raises NotFoundError when the client
    does not exist.
    """
    enforce_amounts({"deuda": debt}, ("deuda",), allow_negative=True)

    updated = (
        db.session.query(Client)
        .filter(Client.id == client_id)
        .update(
            {
                Client.balance: Client.balance - debt,
                Client.version_id: Client.version_id + 1,
                Client.modified_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    if not updated:
        db.session.rollback()
        raise NotFoundError("Client not found")

    # Balance as of this update; read before commit
    new_balance = db.session.query(Client.balance).filter(Client.id == client_id).scalar()
    db.session.commit()
    return new_balance
