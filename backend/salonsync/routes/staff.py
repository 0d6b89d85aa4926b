# backend/salonsync/routes/staff.py
"""Staff management (MANAGER) and roster (SUPERVISOR/MANAGER)."""

from flask import Blueprint, request, jsonify, current_app

from ..errors import SalonSyncError
from ..decorators import require_staff, error_response
from ..services import staff_service


staff_bp = Blueprint("staff", __name__, url_prefix="/api/staff")


@staff_bp.get("")
@require_staff("reports")
def list_staff_route():
    try:
        staff = staff_service.list_staff()
        return jsonify({"staff": [s.to_dict() for s in staff], "count": len(staff)})
    except SalonSyncError as e:
        return error_response(e)


@staff_bp.post("")
@require_staff("admin")
def create_staff_route():
    """
    Request body: {"name": "...", "role": "STAFF", "job_title": "...", "pin": "1234"}
    """
    try:
        staff = staff_service.create_staff(request.get_json(silent=True) or {})
        return jsonify({"staff": staff.to_dict()}), 201
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create staff member")
        return jsonify({"error": "Internal server error"}), 500


@staff_bp.patch("/<int:staff_id>")
@require_staff("admin")
def update_staff_route(staff_id: int):
    try:
        staff = staff_service.update_staff(staff_id, request.get_json(silent=True) or {})
        return jsonify({"staff": staff.to_dict()})
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update staff member")
        return jsonify({"error": "Internal server error"}), 500


@staff_bp.delete("/<int:staff_id>")
@require_staff("admin")
def delete_staff_route(staff_id: int):
    try:
        staff_service.remove_staff(staff_id)
        return jsonify({"deleted": staff_id})
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete staff member")
        return jsonify({"error": "Internal server error"}), 500
