# Overview: Service-layer operations for the clock-in/clock-out toggle.

"""
Clock Toggle Engine

State per staff member: CLOCKED_OUT (initial) <-> CLOCKED_IN.

- CLOCKED_OUT -> CLOCKED_IN: open an attendance record at now, set
  is_clocked_in and last_clock_in.
- CLOCKED_IN -> CLOCKED_OUT: close the open record (duration computed by the
  ledger) and clear is_clocked_in.

If the status flag and the ledger disagree (flag "in" with no open record,
or flag "out" with an open record), nothing is changed and InconsistentState
is raised and logged. Silently resetting the flag would hide lost records.

The token scanned at the terminal only proves presence; whose status flips
is always the caller's verified identity.

CONCURRENCY: toggles for one staff id are serialized by an in-process lock
plus a row lock on the staff record.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..extensions import db
from ..models import StaffMember, AttendanceRecord
from ..errors import InconsistentState, SalonSyncError, StaffNotFound
from ..time_utils import utcnow
from . import attendance_service, token_service
from .concurrency import lock_for_update, staff_lock, storage_guard


CLOCKED_IN = "CLOCKED_IN"
CLOCKED_OUT = "CLOCKED_OUT"


@dataclass
class ToggleOutcome:
    staff: StaffMember
    record: AttendanceRecord
    is_clocked_in: bool
    message: str

    @property
    def status(self) -> str:
        return CLOCKED_IN if self.is_clocked_in else CLOCKED_OUT

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "is_clocked_in": self.is_clocked_in,
            "message": self.message,
            "staff": self.staff.to_dict(),
            "record": self.record.to_dict(),
        }


def _report_inconsistency(staff: StaffMember, message: str) -> InconsistentState:
    current_app.logger.error(
        "Clock state inconsistent for staff %s (%s): %s",
        staff.id, staff.name, message,
    )
    return InconsistentState(
        message,
        details={"staff_id": staff.id, "is_clocked_in": staff.is_clocked_in},
    )


def _clock_in(staff: StaffMember, now) -> ToggleOutcome:
    existing = attendance_service.find_open_record(staff.id)
    if existing is not None:
        raise _report_inconsistency(staff, "Staff is marked clocked out but has an open attendance record")

    record = attendance_service.open_record(staff.id, staff.name, now)
    staff.is_clocked_in = True
    staff.last_clock_in = now
    return ToggleOutcome(
        staff=staff,
        record=record,
        is_clocked_in=True,
        message=f"Success! Welcome back, {staff.name}. You are Clocked In.",
    )


def _clock_out(staff: StaffMember, now) -> ToggleOutcome:
    record = attendance_service.find_open_record(staff.id)
    if record is None:
        raise _report_inconsistency(staff, "Could not find open attendance record")

    attendance_service.close_record(record, now)
    staff.is_clocked_in = False
    return ToggleOutcome(
        staff=staff,
        record=record,
        is_clocked_in=False,
        message=(
            f"Success! Goodbye, {staff.name}. You are Clocked Out "
            f"after {record.duration_hours:.2f} hours."
        ),
    )


def _toggle_locked(staff_id: int) -> ToggleOutcome:
    """Run one transition inside the caller's transaction (no commit)."""
    with storage_guard("staff lookup"):
        staff = lock_for_update(db.session.query(StaffMember).filter_by(id=staff_id)).first()
    if staff is None:
        raise StaffNotFound(details={"staff_id": staff_id})

    now = utcnow()
    if staff.is_clocked_in:
        return _clock_out(staff, now)
    return _clock_in(staff, now)


def toggle(staff_id: int) -> ToggleOutcome:
    """Flip the staff member's clock state and persist it atomically."""
    with staff_lock(staff_id):
        try:
            outcome = _toggle_locked(staff_id)
            with storage_guard("clock toggle"):
                db.session.commit()
        except SalonSyncError:
            db.session.rollback()
            raise
    return outcome


def scan(staff_id: int, token: str, signature: str | None = None) -> ToggleOutcome:
    """
    Terminal scan: check the token, consume it, toggle the caller.

    Token consumption and the toggle commit together, so a toggle that fails
    leaves the token usable.
    """
    require_signature = current_app.config.get("CLOCK_TOKEN_REQUIRE_SIGNATURE", True)

    with staff_lock(staff_id):
        try:
            if require_signature:
                token_service.verify_signature(token, signature)
            token_service.consume_token(token, commit=False)
            outcome = _toggle_locked(staff_id)
            with storage_guard("clock scan"):
                db.session.commit()
        except SalonSyncError:
            db.session.rollback()
            raise
    return outcome


def get_status(staff_id: int) -> dict:
    with storage_guard("staff lookup"):
        staff = db.session.get(StaffMember, staff_id)
    if staff is None:
        raise StaffNotFound(details={"staff_id": staff_id})

    record = attendance_service.find_open_record(staff.id)
    return {
        "staff_id": staff.id,
        "status": CLOCKED_IN if staff.is_clocked_in else CLOCKED_OUT,
        "is_clocked_in": staff.is_clocked_in,
        "open_record": record.to_dict() if record else None,
        "consistent": staff.is_clocked_in == (record is not None),
    }
