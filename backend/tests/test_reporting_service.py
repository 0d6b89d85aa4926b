"""Dashboard aggregate tests."""

from datetime import timedelta

import pytest

from salonsync.errors import ValidationError
from salonsync.services import checkout_service, clock_service, reporting_service


@pytest.fixture
def sales_day(app, clock, stylist, supervisor, haircut, pomade):
    """Three sales on 2026-03-02 and one the next day."""
    checkout_service.commit_transaction(stylist.id, [{"product_id": haircut.id, "quantity": 2}], "Cash")
    checkout_service.commit_transaction(stylist.id, [{"product_id": pomade.id, "quantity": 1}], "Card")
    checkout_service.commit_transaction(supervisor.id, [{"product_id": haircut.id, "quantity": 1}], "Card")
    clock.advance(timedelta(days=1))
    checkout_service.commit_transaction(supervisor.id, [{"product_id": pomade.id, "quantity": 1}], "Transfer")


def test_parse_range_date_end_covers_whole_day(app):
    start, end = reporting_service.parse_range("2026-03-02", "2026-03-02")
    assert start.isoformat() == "2026-03-02T00:00:00"
    assert end.isoformat() == "2026-03-02T23:59:59.999999"


@pytest.mark.parametrize("start,end", [("yesterday", None), ("2026-03-05", "2026-03-01")])
def test_parse_range_rejects(app, start, end):
    with pytest.raises(ValidationError):
        reporting_service.parse_range(start, end)


def test_overview_for_one_day(app, sales_day, supervisor):
    overview = reporting_service.sales_overview(start="2026-03-02", end="2026-03-02")

    assert overview["total_sales"] == 10000 + 3500 + 5000
    assert overview["transaction_count"] == 3
    assert overview["sales_by_category"] == [
        {"name": "Hair Salon", "value": 15000},
        {"name": "Retail Product", "value": 3500},
    ]
    assert overview["sales_by_staff"][0] == {"name": "Jessica Stylist", "sales": 13500, "transactions": 2}
    assert overview["sales_by_payment_method"] == {"Cash": 10000, "Card": 8500}


def test_overview_all_time(app, sales_day):
    overview = reporting_service.sales_overview()

    assert overview["transaction_count"] == 4
    assert overview["sales_by_payment_method"]["Transfer"] == 3500
    # Pomade started at 3 and sold 2
    assert [p["name"] for p in overview["low_stock"]] == ["Matte Clay Pomade"]
    assert overview["low_stock"][0]["stock_level"] == 1


def test_overview_counts_staff_on_shift(app, clock, stylist, supervisor):
    clock_service.toggle(stylist.id)
    overview = reporting_service.sales_overview()
    assert overview["staff_on_shift"] == {"clocked_in": 1, "total": 2}
    assert overview["total_sales"] == 0


def test_list_transactions_filters(app, sales_day, supervisor):
    all_tx = reporting_service.list_transactions()
    assert len(all_tx) == 4
    assert all_tx[0].payment_method == "Transfer"  # newest first

    mine = reporting_service.list_transactions(staff_id=supervisor.id)
    assert {t.staff_name for t in mine} == {"Mike Supervisor"}

    card = reporting_service.list_transactions(payment_method="Card", end="2026-03-02")
    assert len(card) == 2

    with pytest.raises(ValidationError):
        reporting_service.list_transactions(payment_method="Cheque")


def test_attendance_hours(app, clock, stylist, supervisor):
    clock_service.toggle(stylist.id)
    clock_service.toggle(supervisor.id)
    clock.advance(timedelta(hours=8))
    clock_service.toggle(stylist.id)
    clock.advance(timedelta(days=1))
    clock_service.toggle(stylist.id)
    clock.advance(timedelta(hours=4, minutes=30))
    clock_service.toggle(stylist.id)

    rows = reporting_service.attendance_hours()
    # Supervisor's shift is still open and not counted
    assert rows == [
        {"staff_id": stylist.id, "staff_name": "Jessica Stylist", "shifts": 2, "total_hours": 12.5},
    ]

    first_day = reporting_service.attendance_hours(start="2026-03-02", end="2026-03-02")
    assert first_day[0]["total_hours"] == 8.0
