from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

STAFF_ROLES = ("STAFF", "SUPERVISOR", "MANAGER")


class StaffMember(db.Model):
    """
    A person who can sell at the POS and clock in at the terminal.

    WHY: Every sale and every attendance record is attributed to exactly one
    staff member. PIN is the only credential (hashed with bcrypt).

    CLOCK STATUS:
    - is_clocked_in is a cached projection of "an open AttendanceRecord exists".
    - Only the clock toggle engine writes is_clocked_in / last_clock_in.
    """
    __tablename__ = "staff_members"
    __table_args__ = (
        db.CheckConstraint("role IN ('STAFF', 'SUPERVISOR', 'MANAGER')", name="ck_staff_role"),
        db.Index("ix_staff_clocked_in", "is_clocked_in"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(16), nullable=False, default="STAFF")
    job_title = db.Column(db.String(120), nullable=False, default="")

    # bcrypt hash of the 4-6 digit PIN
    pin_hash = db.Column(db.String(255), nullable=False)

    is_clocked_in = db.Column(db.Boolean, nullable=False, default=False)
    last_clock_in = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<StaffMember id={self.id} name={self.name!r} role={self.role}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "job_title": self.job_title,
            "is_clocked_in": self.is_clocked_in,
            "last_clock_in": to_utc_z(self.last_clock_in) if self.last_clock_in else None,
            "created_at": to_utc_z(self.created_at),
        }
