from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class AttendanceRecord(db.Model):
    """
    One shift: clock-in, and later clock-out with the computed duration.

    LIFECYCLE:
    - open: clock_out_at is NULL (shift in progress)
    - closed: clock_out_at and duration_hours set, never modified again

    INVARIANT: at most one open record per staff member.
    """
    __tablename__ = "attendance_records"
    __table_args__ = (
        db.Index("ix_attendance_staff_open", "staff_id", "clock_out_at"),
        db.Index("ix_attendance_clock_in", "clock_in_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff_members.id", ondelete="SET NULL"), nullable=True, index=True)
    staff_name = db.Column(db.String(120), nullable=False)

    work_date = db.Column(db.Date, nullable=False)
    clock_in_at = db.Column(db.DateTime(timezone=True), nullable=False)
    clock_out_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Hours, 2-decimal precision (set on clock-out)
    duration_hours = db.Column(db.Float, nullable=True)

    @property
    def is_open(self) -> bool:
        return self.clock_out_at is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "work_date": self.work_date.isoformat(),
            "clock_in_at": to_utc_z(self.clock_in_at),
            "clock_out_at": to_utc_z(self.clock_out_at) if self.clock_out_at else None,
            "duration_hours": self.duration_hours,
        }


class ClockToken(db.Model):
    """
    Short-lived proof that the scanner stood in front of the shared terminal.

    SINGLE-USE: deleted on successful consumption; expired rows are deleted
    when examined or swept. The token value itself is the primary key.
    """
    __tablename__ = "clock_tokens"
    __table_args__ = (
        db.Index("ix_clock_tokens_expires", "expires_at"),
    )

    token = db.Column(db.String(64), primary_key=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
