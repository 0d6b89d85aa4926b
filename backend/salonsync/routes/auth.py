# backend/salonsync/routes/auth.py
"""PIN login. There are no sessions: the client keeps the staff id and PIN."""

from flask import Blueprint, request, jsonify, current_app

from ..errors import InvalidCredentials, SalonSyncError
from ..decorators import error_response, ROLE_ACCESS
from ..services import staff_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/pin-login")
def pin_login_route():
    """
    Verify a staff member's PIN.

    Request body: {"staff_id": 3, "pin": "3333"}
    Returns the staff record and the dashboard areas the role may open.
    """
    try:
        data = request.get_json(silent=True) or {}
        staff_id = data.get("staff_id")
        pin = data.get("pin")
        if staff_id is None or not pin:
            return error_response(InvalidCredentials("staff_id and pin are required"))

        staff = staff_service.authenticate_by_pin(staff_id, str(pin))
        areas = sorted(area for area, roles in ROLE_ACCESS.items() if staff.role in roles)
        return jsonify({"staff": staff.to_dict(), "areas": areas, "message": f"Welcome, {staff.name}"}), 200

    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to verify PIN")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/staff")
def login_roster_route():
    """Names and roles for the login picker (no PINs, no clock data)."""
    try:
        roster = [
            {"id": s.id, "name": s.name, "role": s.role}
            for s in staff_service.list_staff()
        ]
        return jsonify({"staff": roster})
    except SalonSyncError as e:
        return error_response(e)
