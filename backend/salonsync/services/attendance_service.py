# Overview: Service-layer operations for the attendance ledger.

"""
Attendance Ledger

WHY: Each shift is one AttendanceRecord. Clock-in appends a record, clock-out
closes it once; records are never deleted by normal flow.

INVARIANTS:
- At most one open record (clock_out_at IS NULL) per staff member. Finding
  more than one is a bug and is reported as InconsistentState.
- duration_hours = (clock_out_at - clock_in_at) in hours, rounded half-up
  to 2 decimals.
- Display order (clock-in descending) is a read concern, see list_records().

Functions here flush but do not commit; the clock engine owns the transaction.
"""

from __future__ import annotations

from datetime import datetime

from flask import current_app

from ..extensions import db
from ..models import AttendanceRecord
from ..errors import InconsistentState, NoOpenRecord
from ..time_utils import hours_between
from .concurrency import storage_guard


def compute_duration_hours(clock_in_at: datetime, clock_out_at: datetime) -> float:
    return hours_between(clock_in_at, clock_out_at)


def find_open_record(staff_id: int) -> AttendanceRecord | None:
    with storage_guard("open record lookup"):
        records = db.session.query(AttendanceRecord).filter(
            AttendanceRecord.staff_id == staff_id,
            AttendanceRecord.clock_out_at.is_(None),
        ).all()

    if len(records) > 1:
        current_app.logger.error(
            "Staff %s has %d open attendance records (ids=%s)",
            staff_id, len(records), [r.id for r in records],
        )
        raise InconsistentState(
            "More than one open attendance record",
            details={"staff_id": staff_id, "record_ids": [r.id for r in records]},
        )
    return records[0] if records else None


def open_record(staff_id: int, staff_name: str, clock_in_at: datetime) -> AttendanceRecord:
    record = AttendanceRecord(
        staff_id=staff_id,
        staff_name=staff_name,
        work_date=clock_in_at.date(),
        clock_in_at=clock_in_at,
    )
    with storage_guard("open record"):
        db.session.add(record)
        db.session.flush()
    return record


def close_record(record: AttendanceRecord, clock_out_at: datetime) -> AttendanceRecord:
    if not record.is_open:
        raise NoOpenRecord(details={"record_id": record.id})

    record.clock_out_at = clock_out_at
    record.duration_hours = compute_duration_hours(record.clock_in_at, clock_out_at)
    with storage_guard("close record"):
        db.session.flush()
    return record


def list_records(
    *,
    staff_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    open_only: bool = False,
    limit: int = 500,
) -> list[AttendanceRecord]:
    """Records newest first. start/end bound clock_in_at (inclusive)."""
    query = db.session.query(AttendanceRecord)
    if staff_id is not None:
        query = query.filter(AttendanceRecord.staff_id == staff_id)
    if start is not None:
        query = query.filter(AttendanceRecord.clock_in_at >= start)
    if end is not None:
        query = query.filter(AttendanceRecord.clock_in_at <= end)
    if open_only:
        query = query.filter(AttendanceRecord.clock_out_at.is_(None))

    with storage_guard("attendance list"):
        return query.order_by(
            AttendanceRecord.clock_in_at.desc(),
            AttendanceRecord.id.desc(),
        ).limit(limit).all()
