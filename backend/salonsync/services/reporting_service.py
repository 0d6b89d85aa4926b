# Overview: Read-side aggregates behind the management dashboard.

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func

from ..extensions import db
from ..models import AttendanceRecord, StaffMember, Transaction, TransactionLine, PAYMENT_METHODS
from ..errors import ValidationError
from ..time_utils import parse_iso_datetime
from .catalog_service import list_low_stock
from .concurrency import storage_guard


def _is_date_only(value: str) -> bool:
    return len(value.strip()) == 10


def parse_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    """
    Parse report bounds. A bare date as `end` covers that whole day, so
    start=end=YYYY-MM-DD means "that day".
    """
    try:
        start_dt = parse_iso_datetime(start) if start else None
        end_dt = parse_iso_datetime(end) if end else None
    except ValueError:
        raise ValidationError("start/end must be ISO-8601 dates")

    if end_dt is not None and _is_date_only(end):
        end_dt = end_dt + timedelta(days=1) - timedelta(microseconds=1)
    if start_dt and end_dt and start_dt > end_dt:
        raise ValidationError("start must be before end")
    return start_dt, end_dt


def _filtered_transactions(start_dt, end_dt, staff_id=None, payment_method=None):
    query = db.session.query(Transaction)
    if start_dt:
        query = query.filter(Transaction.created_at >= start_dt)
    if end_dt:
        query = query.filter(Transaction.created_at <= end_dt)
    if staff_id is not None:
        query = query.filter(Transaction.staff_id == staff_id)
    if payment_method:
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"payment_method must be one of {', '.join(PAYMENT_METHODS)}")
        query = query.filter(Transaction.payment_method == payment_method)
    return query


def list_transactions(
    *,
    start: str | None = None,
    end: str | None = None,
    staff_id: int | None = None,
    payment_method: str | None = None,
    limit: int = 500,
) -> list[Transaction]:
    """Transaction history, newest first."""
    start_dt, end_dt = parse_range(start, end)
    query = _filtered_transactions(start_dt, end_dt, staff_id, payment_method)
    with storage_guard("transaction list"):
        return query.order_by(Transaction.created_at.desc(), Transaction.id.desc()).limit(limit).all()


def sales_overview(*, start: str | None = None, end: str | None = None) -> dict:
    start_dt, end_dt = parse_range(start, end)
    tx_query = _filtered_transactions(start_dt, end_dt)

    with storage_guard("sales overview"):
        total_sales, tx_count = tx_query.with_entities(
            func.coalesce(func.sum(Transaction.total_amount), 0),
            func.count(Transaction.id),
        ).one()

        line_query = db.session.query(
            TransactionLine.category,
            func.sum(TransactionLine.line_total),
        ).join(Transaction, TransactionLine.transaction_id == Transaction.id)
        if start_dt:
            line_query = line_query.filter(Transaction.created_at >= start_dt)
        if end_dt:
            line_query = line_query.filter(Transaction.created_at <= end_dt)
        by_category = line_query.group_by(TransactionLine.category).all()

        by_staff = tx_query.with_entities(
            Transaction.staff_name,
            func.sum(Transaction.total_amount),
            func.count(Transaction.id),
        ).group_by(Transaction.staff_name).all()

        by_payment = tx_query.with_entities(
            Transaction.payment_method,
            func.sum(Transaction.total_amount),
        ).group_by(Transaction.payment_method).all()

        staff_total = db.session.query(func.count(StaffMember.id)).scalar()
        staff_on_shift = db.session.query(func.count(StaffMember.id)).filter(
            StaffMember.is_clocked_in.is_(True)
        ).scalar()

        low_stock = list_low_stock()

    return {
        "total_sales": int(total_sales or 0),
        "transaction_count": int(tx_count or 0),
        "sales_by_category": [
            {"name": name, "value": int(value)}
            for name, value in sorted(by_category, key=lambda row: -(row[1] or 0))
            if value
        ],
        "sales_by_staff": [
            {"name": name, "sales": int(sales or 0), "transactions": count}
            for name, sales, count in sorted(by_staff, key=lambda row: -(row[1] or 0))
        ],
        "sales_by_payment_method": {method: int(total or 0) for method, total in by_payment},
        "staff_on_shift": {"clocked_in": staff_on_shift or 0, "total": staff_total or 0},
        "low_stock": [p.to_dict() for p in low_stock],
    }


def attendance_hours(*, start: str | None = None, end: str | None = None) -> list[dict]:
    """Closed-shift hours per staff member within the range (by clock-in)."""
    start_dt, end_dt = parse_range(start, end)

    query = db.session.query(
        AttendanceRecord.staff_id,
        AttendanceRecord.staff_name,
        func.count(AttendanceRecord.id),
        func.coalesce(func.sum(AttendanceRecord.duration_hours), 0.0),
    ).filter(AttendanceRecord.clock_out_at.isnot(None))
    if start_dt:
        query = query.filter(AttendanceRecord.clock_in_at >= start_dt)
    if end_dt:
        query = query.filter(AttendanceRecord.clock_in_at <= end_dt)

    with storage_guard("attendance hours"):
        rows = query.group_by(AttendanceRecord.staff_id, AttendanceRecord.staff_name).all()

    return [
        {
            "staff_id": staff_id,
            "staff_name": staff_name,
            "shifts": shifts,
            "total_hours": round(float(hours or 0), 2),
        }
        for staff_id, staff_name, shifts, hours in sorted(rows, key=lambda row: row[1])
    ]
