# backend/salonsync/routes/system.py
"""System health endpoint used by the terminal display and deploy checks."""

import time
from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import StaffMember, Product, ClockToken
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        details = {
            "staff": db.session.query(StaffMember).count(),
            "products": db.session.query(Product).count(),
            "live_tokens": db.session.query(ClockToken).filter(ClockToken.expires_at >= utcnow()).count(),
        }
        return {
            "status": "healthy",
            "latency_ms": round((time.time() - start_time) * 1000, 2),
            "details": details,
        }
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start_time) * 1000, 2),
            "error": "Database error",
        }


@system_bp.get("/api/health")
def health():
    database = check_database_health()
    healthy = database["status"] == "healthy"
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "time": to_utc_z(utcnow()),
        "database": database,
    }
    return jsonify(body), 200 if healthy else 503
