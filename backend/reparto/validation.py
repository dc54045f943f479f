from __future__ import annotations
from enum import Enum

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Currency amounts are whole units; keeps sums inside SQLite's signed 64-bit range
MAX_AMOUNT = 999_999_999

MIN_PASSWORD_LENGTH = 6

STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"
STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"


class ServiceError(Exception):
    """Base for errors that map onto an HTTP response."""
    kind = ErrorKind.STORAGE
    http_status = 500


class ValidationError(ServiceError, ValueError):
    """400-level input problem."""
    kind = ErrorKind.VALIDATION
    http_status = 400


class AuthenticationError(ServiceError):
    """401: credentials did not match an active user."""
    kind = ErrorKind.AUTHENTICATION
    http_status = 401


class ForbiddenError(ServiceError):
    """403: operation disabled by configuration."""
    kind = ErrorKind.FORBIDDEN
    http_status = 403


class NotFoundError(ServiceError, LookupError):
    """404: referenced id has no matching row."""
    kind = ErrorKind.NOT_FOUND
    http_status = 404


class ConflictError(ServiceError, ValueError):
    """409-level business rule conflict (e.g., duplicate username)."""
    kind = ErrorKind.CONFLICT
    http_status = 409


class StorageError(ServiceError):
    """500: constraint violation or I/O failure in the database."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def coerce_int(key: str, value: Any) -> int:
    """
    Strict integer parsing for JSON/query input.

    Accepts ints and digit strings (optional sign). Rejects bools, floats,
    decimals and scientific notation.
    """
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    # Whole floats come from JS clients (e.g. 1500.0)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValidationError(f"{key} must be an integer")


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return coerce_int(col.key, value)

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string")
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if payload.get(f) in (None, ""))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        # NULL handling
        if raw is None:
            if not col.nullable and col.default is None and col.server_default is None:
                raise ValidationError(f"{k} cannot be null")
            if col.nullable:
                patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank strings: rejected for required columns, stored as NULL otherwise
        if isinstance(col.type, (String, Text)) and val == "":
            if not col.nullable:
                raise ValidationError(f"{k} cannot be blank")
            val = None

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_amounts(patch: dict, fields: tuple[str, ...], *, allow_negative: bool = False) -> None:
    """Range checks for currency/quantity columns already coerced to int."""
    for field in fields:
        value = patch.get(field)
        if value is None:
            continue
        if not allow_negative and value < 0:
            raise ValidationError(f"{field} must be >= 0")
        if abs(value) > MAX_AMOUNT:
            raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT}")


def enforce_status(patch: dict) -> None:
    if "status" in patch and patch["status"] not in STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(STATUSES)}")


def enforce_password(password: Any) -> str:
    if not isinstance(password, str) or not password.strip():
        raise ValidationError("password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def require_int_arg(data: dict, key: str) -> int:
    """Pull a required integer out of a JSON body or query args."""
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required")
    return coerce_int(key, value)


def optional_int_arg(data, key: str) -> int | None:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_int(key, value)
