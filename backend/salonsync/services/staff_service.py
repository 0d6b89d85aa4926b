# Overview: Service-layer operations for staff records and PIN verification.

"""
Staff Directory

WHY: Staff log in at the POS with a short numeric PIN, and the same PIN
check authorizes clock scans and dashboard actions. Nothing else about
authentication lives here (no passwords, no sessions).

SECURITY NOTES:
- PINs are 4-6 digits and stored as bcrypt hashes (cost PIN_HASH_ROUNDS).
- verify_pin() is timing-safe via bcrypt.checkpw().
- Unknown staff and wrong PIN produce the same InvalidCredentials error.
"""

from __future__ import annotations

import re

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import StaffMember, AttendanceRecord, Transaction
from ..errors import InvalidCredentials, StaffNotFound, StaffClockedIn, ValidationError
from ..validation import STAFF_POLICY, validate_payload, enforce_rules_staff
from .concurrency import storage_guard


PIN_PATTERN = re.compile(r"^\d{4,6}$")


def validate_pin(pin) -> str:
    if not isinstance(pin, str) or not PIN_PATTERN.match(pin):
        raise ValidationError("PIN must be 4 to 6 digits")
    return pin


def hash_pin(pin: str) -> str:
    validate_pin(pin)
    rounds = current_app.config.get("PIN_HASH_ROUNDS", 12)
    hashed = bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_pin(pin: str, pin_hash: str) -> bool:
    if not pin or not pin_hash:
        return False
    try:
        return bcrypt.checkpw(pin.encode("utf-8"), pin_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False


def get_staff(staff_id) -> StaffMember:
    with storage_guard("staff lookup"):
        staff = db.session.get(StaffMember, staff_id) if staff_id is not None else None
    if staff is None:
        raise StaffNotFound(details={"staff_id": staff_id})
    return staff


def authenticate_by_pin(staff_id, pin) -> StaffMember:
    """
    Identity check: the staff member with this id, if the PIN matches.

    Raises InvalidCredentials for an unknown id or a wrong PIN.
    """
    try:
        staff_id = int(staff_id)
    except (TypeError, ValueError):
        raise InvalidCredentials()

    with storage_guard("PIN check"):
        staff = db.session.get(StaffMember, staff_id)
    if staff is None or not verify_pin(str(pin or ""), staff.pin_hash):
        raise InvalidCredentials()
    return staff


def list_staff() -> list[StaffMember]:
    with storage_guard("staff list"):
        return db.session.query(StaffMember).order_by(StaffMember.name.asc()).all()


def create_staff(payload: dict) -> StaffMember:
    data = dict(payload or {})
    pin = data.pop("pin", None)
    if pin is None:
        raise ValidationError("Missing required fields: pin")

    patch = validate_payload(model=StaffMember, payload=data, policy=STAFF_POLICY, partial=False)
    enforce_rules_staff(patch)

    staff = StaffMember(pin_hash=hash_pin(pin), **patch)
    with storage_guard("staff create"):
        db.session.add(staff)
        db.session.commit()
    return staff


def update_staff(staff_id: int, payload: dict) -> StaffMember:
    staff = get_staff(staff_id)

    data = dict(payload or {})
    pin = data.pop("pin", None)
    patch = validate_payload(model=StaffMember, payload=data, policy=STAFF_POLICY, partial=True)
    enforce_rules_staff(patch)

    for key, value in patch.items():
        setattr(staff, key, value)
    if pin is not None:
        staff.pin_hash = hash_pin(pin)

    with storage_guard("staff update"):
        db.session.commit()
    return staff


def remove_staff(staff_id: int) -> None:
    """
    Delete a staff member.

    Blocked while clocked in: the open shift would be orphaned. Attendance
    history and transaction snapshots keep the staff name.
    """
    staff = get_staff(staff_id)
    if staff.is_clocked_in:
        raise StaffClockedIn(details={"staff_id": staff.id})

    with storage_guard("staff delete"):
        db.session.query(AttendanceRecord).filter_by(staff_id=staff.id).update(
            {"staff_id": None}, synchronize_session=False
        )
        db.session.query(Transaction).filter_by(staff_id=staff.id).update(
            {"staff_id": None}, synchronize_session=False
        )
        db.session.delete(staff)
        db.session.commit()
