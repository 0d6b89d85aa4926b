# Overview: Request decorators that identify the calling staff member by PIN.

from functools import wraps
from flask import request, jsonify, g, current_app

from .errors import Forbidden, InvalidCredentials, SalonSyncError
from .services import staff_service


# Which roles may reach each dashboard area
ROLE_ACCESS = {
    "pos": {"STAFF", "SUPERVISOR", "MANAGER"},
    "clock": {"STAFF", "SUPERVISOR", "MANAGER"},
    "reports": {"SUPERVISOR", "MANAGER"},
    "terminal": {"SUPERVISOR", "MANAGER"},
    "admin": {"MANAGER"},
}


def error_response(error: SalonSyncError):
    return jsonify(error.to_dict()), error.http_status


def require_staff(area: str):
    """
    Require a staff member whose role may access `area`.

    The caller identifies with X-Staff-Id and X-Staff-Pin headers; the PIN is
    checked on every request (there are no sessions). Sets g.current_staff.

    Returns 401 for missing/invalid credentials, 403 for a role outside the
    area's allowlist.
    """
    allowed = ROLE_ACCESS[area]

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            staff_id = request.headers.get("X-Staff-Id")
            pin = request.headers.get("X-Staff-Pin")
            if not staff_id or not pin:
                return error_response(InvalidCredentials("Staff credentials required"))

            try:
                staff = staff_service.authenticate_by_pin(staff_id, pin)
            except SalonSyncError as e:
                return error_response(e)

            if staff.role not in allowed:
                current_app.logger.info(
                    "Staff %s (%s) denied access to %s %s",
                    staff.id, staff.role, request.method, request.path,
                )
                return error_response(Forbidden(details={"area": area, "role": staff.role}))

            g.current_staff = staff
            return f(*args, **kwargs)

        return decorated_function

    return decorator
