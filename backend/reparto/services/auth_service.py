# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication and user registration.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost from BCRYPT_ROUNDS, default 12)
- Verification goes through bcrypt.checkpw, which compares in constant time
- Inactive users cannot log in
"""

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import User
from ..time_utils import utcnow
from ..validation import (
    AuthenticationError,
    ConflictError,
    ModelValidationPolicy,
    STATUS_ACTIVE,
    ValidationError,
    validate_payload,
)

DEFAULT_ADMIN_ID = 1
DEFAULT_ADMIN_USERNAME = "admin"

USER_POLICY = ModelValidationPolicy(
    writable_fields={"hierarchy", "username", "name", "dni", "phone", "email"},
    required_on_create={"hierarchy", "username", "name"},
)


def hash_password(password: str) -> str:
    """Hash password using bcrypt; the salt is embedded in the result."""
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def authenticate(username: str, password: str) -> User:
    """
    Resolve credentials to an active user.

    Raises AuthenticationError on unknown username, wrong password or an
    inactive account; the message does not say which.
    """
    user = db.session.query(User).filter_by(username=username).first()
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid username or password")
    if user.status != STATUS_ACTIVE:
        raise AuthenticationError("Invalid username or password")
    return user


def register_user(payload: dict) -> User:
    """
    Create a user from a JSON payload.

    hierarchy, username, name and password are required; dni, phone and email
    are optional but may not be blank when given.
    """
    if payload is not None and not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    payload = dict(payload or {})
    password = payload.pop("password", None)
    if not isinstance(password, str) or not password.strip():
        raise ValidationError("hierarchy, username, name, and password are required")

    for optional in ("dni", "phone", "email"):
        value = payload.get(optional)
        if isinstance(value, str) and value.strip() == "":
            raise ValidationError(f"{optional} cannot be empty if provided")

    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=False)

    if db.session.query(User).filter_by(username=patch["username"]).first():
        raise ConflictError("Username already exists")

    user = User(**patch)
    user.password_hash = hash_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Username already exists")
    return user


def ensure_default_admin(*, commit: bool = True) -> User | None:
    """
    Create the default administrator (id=1, username "admin") if missing.

    Returns the created user, or None when it already exists. With
    commit=False the row is only flushed and the caller owns the transaction.
    """
    existing = (
        db.session.query(User)
        .filter((User.id == DEFAULT_ADMIN_ID) | (User.username == DEFAULT_ADMIN_USERNAME))
        .first()
    )
    if existing:
        return None

    password = current_app.config.get("DEFAULT_ADMIN_PASSWORD", "admin")
    admin = User(
        id=DEFAULT_ADMIN_ID,
        hierarchy=1,
        username=DEFAULT_ADMIN_USERNAME,
        name="Administrator",
        password_hash=hash_password(password),
        status=STATUS_ACTIVE,
        status_changed_at=utcnow(),
    )
    db.session.add(admin)
    if not commit:
        db.session.flush()
        return admin
    db.session.commit()
    current_app.logger.info("Default admin user created")
    if password == "admin":
        current_app.logger.warning("Default admin is using the stock password; set DEFAULT_ADMIN_PASSWORD")
    return admin
