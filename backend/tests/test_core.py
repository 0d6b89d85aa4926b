"""Result-returning facade: errors become statuses, never exceptions."""

from datetime import timedelta

from salonsync import core
from salonsync.models import AttendanceRecord, Transaction
from salonsync.extensions import db


def test_issue_and_scan(app, clock, stylist):
    issued = core.issue_token()
    assert issued.ok and issued.http_status == 201
    assert set(issued.data) == {"token", "expires_at", "signature"}

    result = core.scan(stylist.id, issued.data["token"], issued.data["signature"])
    assert result.ok
    assert result.status == core.OK
    assert result.data["status"] == "CLOCKED_IN"


def test_scan_failure_is_a_value(app, clock, stylist):
    result = core.scan(stylist.id, "never-issued", "sig")

    assert result.ok is False
    assert result.status == "TOKEN_NOT_FOUND"
    assert result.message == "Invalid token"
    assert result.to_dict() == {"ok": False, "status": "TOKEN_NOT_FOUND", "message": "Invalid token", "data": {}}


def test_toggle(app, clock, stylist):
    assert core.toggle(stylist.id).data["is_clocked_in"] is True
    clock.advance(timedelta(minutes=90))
    result = core.toggle(stylist.id)
    assert result.message.endswith("after 1.50 hours.")
    assert db.session.query(AttendanceRecord).one().duration_hours == 1.5


def test_toggle_unknown_staff(app, clock):
    result = core.toggle(12345)
    assert (result.ok, result.status, result.http_status) == (False, "STAFF_NOT_FOUND", 404)
    assert result.data == {"staff_id": 12345}


def test_commit_transaction(app, clock, stylist, haircut):
    result = core.commit_transaction(stylist.id, [{"product_id": haircut.id, "quantity": 1}], "Cash")
    assert result.ok and result.http_status == 201
    assert result.data["transaction"]["total_amount"] == 5000

    failed = core.commit_transaction(stylist.id, [], "Cash")
    assert failed.status == "EMPTY_CART"


def test_huge_quantity_is_reported_not_raised(app, clock, stylist, pomade):
    result = core.commit_transaction(stylist.id, [{"product_id": pomade.id, "quantity": 2**63, "price": 0}], "Cash")

    assert (result.ok, result.status) == (False, "INVALID_LINE")
    assert db.session.query(Transaction).count() == 0
