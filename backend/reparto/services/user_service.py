# Overview: Service-layer operations for user administration.

from __future__ import annotations

from ..extensions import db
from ..models import User
from ..time_utils import utcnow
from ..validation import (
    ConflictError,
    NotFoundError,
    STATUS_ACTIVE,
    ValidationError,
    enforce_password,
    enforce_status,
    validate_payload,
)
from .auth_service import USER_POLICY, hash_password


def _get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users() -> list[dict]:
    """Active users as {id, name} pairs, for pickers."""
    users = (
        db.session.query(User)
        .filter(User.status == STATUS_ACTIVE)
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )
    return [{"id": u.id, "name": u.name} for u in users]


def list_user_management() -> list[dict]:
    """Every user, active or not, without credentials."""
    users = db.session.query(User).order_by(User.id.asc()).all()
    return [u.to_dict() for u in users]


def update_user(user_id: int, payload: dict) -> dict:
    user = _get_user(user_id)
    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=True)
    if not patch:
        raise ValidationError("No fields to update")

    if "username" in patch and patch["username"] != user.username:
        taken = (
            db.session.query(User)
            .filter(User.username == patch["username"], User.id != user.id)
            .first()
        )
        if taken:
            raise ConflictError("Username already exists")

    for key, value in patch.items():
        setattr(user, key, value)
    db.session.commit()
    return user.to_dict()


def set_user_status(user_id: int, status) -> dict:
    patch = {"status": status}
    enforce_status(patch)
    user = _get_user(user_id)
    if user.status != status:
        user.status = status
        user.status_changed_at = utcnow()
    db.session.commit()
    return user.to_dict()


def update_user_password(user_id: int, password) -> None:
    password = enforce_password(password)
    user = _get_user(user_id)
    user.password_hash = hash_password(password)
    db.session.commit()
