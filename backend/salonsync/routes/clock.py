# backend/salonsync/routes/clock.py
"""
Terminal and attendance routes.

- The terminal (SUPERVISOR/MANAGER device) requests a fresh token every
  CLOCK_TOKEN_TTL_MINUTES and renders the QR payload.
- A staff device posts the scanned payload; the caller's own PIN decides
  whose clock flips.
"""

from flask import Blueprint, request, jsonify, g, current_app

from .. import core
from ..errors import Forbidden, SalonSyncError, ValidationError
from ..decorators import require_staff, error_response, ROLE_ACCESS
from ..services import attendance_service, clock_service, token_service
from ..services.reporting_service import parse_range


clock_bp = Blueprint("clock", __name__, url_prefix="/api")


@clock_bp.post("/clock/tokens")
@require_staff("terminal")
def issue_token_route():
    result = core.issue_token()
    if result.ok:
        result.data["refresh_after_minutes"] = current_app.config["CLOCK_TOKEN_TTL_MINUTES"]
    return jsonify(result.to_dict()), result.http_status


@clock_bp.post("/clock/scan")
@require_staff("clock")
def scan_route():
    """
    Request body: {"token": "...", "signature": "..."} as read from the QR code.
    """
    data = request.get_json(silent=True) or {}
    token = data.get("token")
    if not token:
        return error_response(ValidationError("token is required"))

    result = core.scan(g.current_staff.id, token, data.get("signature"))
    return jsonify(result.to_dict()), result.http_status


@clock_bp.get("/clock/status/<int:staff_id>")
@require_staff("clock")
def status_route(staff_id: int):
    if staff_id != g.current_staff.id and g.current_staff.role not in ROLE_ACCESS["reports"]:
        return error_response(Forbidden("Can only view your own clock status"))
    try:
        return jsonify(clock_service.get_status(staff_id))
    except SalonSyncError as e:
        return error_response(e)


@clock_bp.get("/attendance")
@require_staff("reports")
def list_attendance_route():
    try:
        start_dt, end_dt = parse_range(request.args.get("start"), request.args.get("end"))
        records = attendance_service.list_records(
            staff_id=request.args.get("staff_id", type=int),
            start=start_dt,
            end=end_dt,
            open_only=request.args.get("open") == "1",
        )
        return jsonify({"records": [r.to_dict() for r in records], "count": len(records)})
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list attendance")
        return jsonify({"error": "Internal server error"}), 500


@clock_bp.post("/clock/tokens/sweep")
@require_staff("admin")
def sweep_tokens_route():
    try:
        deleted = token_service.sweep_expired_tokens()
        return jsonify({"deleted": deleted})
    except SalonSyncError as e:
        return error_response(e)
