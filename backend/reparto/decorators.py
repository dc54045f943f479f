# Overview: Request decorators for API routes.

from functools import wraps

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from .extensions import db
from .validation import ConflictError, ServiceError, StorageError, ValidationError


def json_body() -> dict:
    """The request's JSON object; {} when the body is missing or not JSON."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


def error_response(exc: ServiceError):
    return jsonify({"error": str(exc), "kind": exc.kind.value}), exc.http_status


def json_errors(f):
    """
    Translate service exceptions into JSON error responses.

    - ServiceError subclasses map to their own status (400/401/403/404/409)
    - StaleDataError (optimistic version mismatch) is a 409 conflict
    - SQLAlchemyError is rolled back, logged and reported as a 500 storage
      error carrying the driver message
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ServiceError as exc:
            return error_response(exc)
        except StaleDataError:
            db.session.rollback()
            current_app.logger.warning("Concurrent modification in %s", f.__name__)
            return error_response(ConflictError("Record was modified concurrently; reload and retry"))
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("Database error in %s", f.__name__)
            message = str(getattr(exc, "orig", None) or exc)
            return error_response(StorageError(message))

    return decorated_function
