# backend/reparto/routes/system.py
"""
Welcome, health and test-data endpoints.
"""

import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from ..decorators import json_errors
from ..extensions import db
from ..services import seed_service
from ..validation import ForbiddenError

system_bp = Blueprint("system", __name__)


@system_bp.get("/")
def index():
    return "Welcome to the server!"


def check_database_health() -> dict:
    """Round-trip a trivial query and report latency."""
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    status_code = 200 if database["status"] == "healthy" else 503
    return jsonify({"status": database["status"], "database": database}), status_code


@system_bp.post("/populate-test-data")
@json_errors
def populate_test_data_route():
    """Seed demo data. Disabled unless SEED_ENABLED is set."""
    if not current_app.config.get("SEED_ENABLED"):
        raise ForbiddenError("Test data population is disabled")
    counts = seed_service.populate_test_data()
    return jsonify({"message": "Test data populated successfully", "created": counts}), 200
