# backend/salonsync/routes/reports.py
"""Dashboard aggregates (SUPERVISOR/MANAGER)."""

from flask import Blueprint, request, jsonify, current_app

from ..errors import SalonSyncError
from ..decorators import require_staff, error_response
from ..services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/overview")
@require_staff("reports")
def overview_route():
    try:
        return jsonify(reporting_service.sales_overview(
            start=request.args.get("start"),
            end=request.args.get("end"),
        ))
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to build sales overview")
        return jsonify({"error": "Internal server error"}), 500


@reports_bp.get("/attendance-hours")
@require_staff("reports")
def attendance_hours_route():
    try:
        rows = reporting_service.attendance_hours(
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
        return jsonify({"staff": rows, "count": len(rows)})
    except SalonSyncError as e:
        return error_response(e)
