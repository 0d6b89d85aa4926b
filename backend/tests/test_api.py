"""
HTTP API tests.

Verifies:
- Missing or wrong PINs return 401, disallowed roles 403
- Terminal -> scan -> status round trip
- Checkout, catalog, staff and report endpoints
"""

from datetime import timedelta

import pytest

from salonsync.extensions import db
from salonsync.models import Transaction

from conftest import staff_headers


# =============================================================================
# AUTHENTICATION / AUTHORIZATION
# =============================================================================


class TestAuth:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/clock/tokens"),
            ("POST", "/api/clock/scan"),
            ("GET", "/api/attendance"),
            ("GET", "/api/transactions"),
            ("POST", "/api/transactions"),
            ("GET", "/api/staff"),
            ("GET", "/api/products"),
            ("GET", "/api/reports/overview"),
        ],
    )
    def test_requires_credentials(self, client, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401
        assert resp.json["code"] == "INVALID_CREDENTIALS"

    def test_wrong_pin(self, client, stylist):
        resp = client.get("/api/products", headers=staff_headers(stylist, "0000"))
        assert resp.status_code == 401

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/clock/tokens"),
            ("GET", "/api/attendance"),
            ("GET", "/api/reports/overview"),
            ("GET", "/api/staff"),
            ("POST", "/api/products"),
        ],
    )
    def test_staff_role_denied(self, client, stylist_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=stylist_headers, json={})
        assert resp.status_code == 403
        assert resp.json["code"] == "FORBIDDEN"

    def test_supervisor_cannot_manage_staff(self, client, supervisor_headers):
        resp = client.post("/api/staff", headers=supervisor_headers, json={"name": "X", "role": "STAFF", "pin": "1234"})
        assert resp.status_code == 403

    def test_pin_login(self, client, supervisor):
        resp = client.post("/api/auth/pin-login", json={"staff_id": supervisor.id, "pin": "2222"})
        assert resp.status_code == 200
        assert resp.json["staff"]["name"] == "Mike Supervisor"
        assert resp.json["areas"] == ["clock", "pos", "reports", "terminal"]

    def test_pin_login_rejects(self, client, supervisor):
        resp = client.post("/api/auth/pin-login", json={"staff_id": supervisor.id, "pin": "1111"})
        assert resp.status_code == 401

    def test_login_roster_hides_pins(self, client, stylist, manager):
        resp = client.get("/api/auth/staff")
        assert resp.status_code == 200
        assert {s["name"] for s in resp.json["staff"]} == {"Jessica Stylist", "Sarah Manager"}
        assert all(set(s) == {"id", "name", "role"} for s in resp.json["staff"])


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json["status"] == "healthy"


# =============================================================================
# CLOCK
# =============================================================================


class TestClockFlow:

    def _issue(self, client, headers):
        resp = client.post("/api/clock/tokens", headers=headers)
        assert resp.status_code == 201
        return resp.json["data"]

    def test_terminal_scan_round_trip(self, client, clock, supervisor_headers, stylist, stylist_headers):
        qr = self._issue(client, supervisor_headers)
        assert qr["refresh_after_minutes"] == 20

        resp = client.post("/api/clock/scan", headers=stylist_headers,
                           json={"token": qr["token"], "signature": qr["signature"]})
        assert resp.status_code == 200
        assert resp.json["ok"] is True
        assert resp.json["status"] == "OK"
        assert resp.json["message"] == "Success! Welcome back, Jessica Stylist. You are Clocked In."
        assert resp.json["data"]["status"] == "CLOCKED_IN"

        status = client.get(f"/api/clock/status/{stylist.id}", headers=stylist_headers)
        assert status.json["is_clocked_in"] is True

        # Same code cannot be reused
        replay = client.post("/api/clock/scan", headers=stylist_headers,
                             json={"token": qr["token"], "signature": qr["signature"]})
        assert replay.status_code == 400
        assert replay.json["status"] == "TOKEN_NOT_FOUND"
        assert replay.json["message"] == "Invalid token"

        clock.advance(timedelta(hours=1, minutes=45))
        qr = self._issue(client, supervisor_headers)
        resp = client.post("/api/clock/scan", headers=stylist_headers,
                           json={"token": qr["token"], "signature": qr["signature"]})
        assert resp.json["message"] == "Success! Goodbye, Jessica Stylist. You are Clocked Out after 1.75 hours."

    def test_expired_code(self, client, clock, supervisor_headers, stylist_headers):
        qr = self._issue(client, supervisor_headers)
        clock.advance(timedelta(minutes=25))

        resp = client.post("/api/clock/scan", headers=stylist_headers,
                           json={"token": qr["token"], "signature": qr["signature"]})
        assert resp.json["status"] == "TOKEN_EXPIRED"

    def test_scan_requires_token(self, client, stylist_headers):
        resp = client.post("/api/clock/scan", headers=stylist_headers, json={})
        assert resp.status_code == 400
        assert resp.json["code"] == "VALIDATION_ERROR"

    def test_status_of_others_needs_reports_role(self, client, stylist_headers, supervisor, supervisor_headers, stylist):
        assert client.get(f"/api/clock/status/{supervisor.id}", headers=stylist_headers).status_code == 403
        assert client.get(f"/api/clock/status/{stylist.id}", headers=supervisor_headers).status_code == 200

    def test_inconsistent_state_is_409(self, client, clock, supervisor_headers, stylist, stylist_headers):
        stylist.is_clocked_in = True
        db.session.commit()
        qr = self._issue(client, supervisor_headers)

        resp = client.post("/api/clock/scan", headers=stylist_headers,
                           json={"token": qr["token"], "signature": qr["signature"]})
        assert resp.status_code == 409
        assert resp.json["status"] == "INCONSISTENT_STATE"

    def test_attendance_listing(self, client, clock, supervisor_headers, stylist, stylist_headers):
        for _ in range(2):
            qr = self._issue(client, supervisor_headers)
            client.post("/api/clock/scan", headers=stylist_headers,
                        json={"token": qr["token"], "signature": qr["signature"]})
            clock.advance(timedelta(hours=3))

        resp = client.get(f"/api/attendance?staff_id={stylist.id}", headers=supervisor_headers)
        assert resp.status_code == 200
        assert resp.json["count"] == 1
        assert resp.json["records"][0]["duration_hours"] == 3.0

    def test_sweep(self, client, clock, supervisor_headers, manager_headers):
        self._issue(client, supervisor_headers)
        clock.advance(timedelta(hours=1))
        resp = client.post("/api/clock/tokens/sweep", headers=manager_headers)
        assert resp.json == {"deleted": 1}


# =============================================================================
# CHECKOUT
# =============================================================================


class TestTransactions:

    def test_checkout(self, client, clock, stylist_headers, haircut, pomade):
        resp = client.post("/api/transactions", headers=stylist_headers, json={
            "payment_method": "Card",
            "items": [{"product_id": haircut.id, "quantity": 2}, {"product_id": pomade.id, "quantity": 5}],
        })
        assert resp.status_code == 201
        tx = resp.json["data"]["transaction"]
        assert tx["total_amount"] == 10000 + 17500
        assert len(tx["items"]) == 2
        assert resp.json["data"]["stock_updates"][0]["stock_level"] == 0

    def test_empty_cart(self, client, stylist_headers):
        resp = client.post("/api/transactions", headers=stylist_headers, json={"payment_method": "Cash", "items": []})
        assert resp.status_code == 400
        assert resp.json["status"] == "EMPTY_CART"
        assert db.session.query(Transaction).count() == 0

    def test_items_must_be_list(self, client, stylist_headers):
        resp = client.post("/api/transactions", headers=stylist_headers, json={"payment_method": "Cash", "items": "x"})
        assert resp.status_code == 400

    def test_bad_payment_method(self, client, stylist_headers, haircut):
        resp = client.post("/api/transactions", headers=stylist_headers, json={
            "payment_method": "IOU", "items": [{"product_id": haircut.id, "quantity": 1}],
        })
        assert resp.json["status"] == "INVALID_PAYMENT_METHOD"

    def test_history_and_detail(self, client, clock, stylist_headers, supervisor_headers, haircut):
        created = client.post("/api/transactions", headers=stylist_headers, json={
            "payment_method": "Cash", "items": [{"product_id": haircut.id, "quantity": 1}],
        }).json["data"]["transaction"]

        history = client.get("/api/transactions?start=2026-03-02&end=2026-03-02", headers=supervisor_headers)
        assert history.json["count"] == 1
        assert history.json["total_amount"] == 5000

        detail = client.get(f"/api/transactions/{created['id']}", headers=supervisor_headers)
        assert detail.json["transaction"]["items"][0]["product_name"] == "Ladies Cut & Style"

        assert client.get("/api/transactions/9999", headers=supervisor_headers).status_code == 404

    def test_bad_date_range(self, client, supervisor_headers):
        resp = client.get("/api/transactions?start=nope", headers=supervisor_headers)
        assert resp.status_code == 400


# =============================================================================
# STAFF / CATALOG / REPORTS
# =============================================================================


class TestManagement:

    def test_staff_crud(self, client, manager_headers):
        resp = client.post("/api/staff", headers=manager_headers,
                           json={"name": "David Barber", "role": "STAFF", "job_title": "Master Barber", "pin": "4444"})
        assert resp.status_code == 201
        staff_id = resp.json["staff"]["id"]

        resp = client.patch(f"/api/staff/{staff_id}", headers=manager_headers, json={"job_title": "Senior Barber"})
        assert resp.json["staff"]["job_title"] == "Senior Barber"

        assert client.delete(f"/api/staff/{staff_id}", headers=manager_headers).json == {"deleted": staff_id}
        assert client.delete(f"/api/staff/{staff_id}", headers=manager_headers).status_code == 404

    def test_cannot_delete_clocked_in_staff(self, client, clock, manager_headers, supervisor_headers, stylist, stylist_headers):
        qr = client.post("/api/clock/tokens", headers=supervisor_headers).json["data"]
        client.post("/api/clock/scan", headers=stylist_headers, json={"token": qr["token"], "signature": qr["signature"]})

        resp = client.delete(f"/api/staff/{stylist.id}", headers=manager_headers)
        assert resp.status_code == 409
        assert resp.json["code"] == "STAFF_CLOCKED_IN"

    def test_product_crud(self, client, manager_headers, stylist_headers):
        resp = client.post("/api/products", headers=manager_headers,
                           json={"name": "Hot Stone Massage", "price": 12000, "category": "Spa"})
        assert resp.status_code == 201
        product_id = resp.json["product"]["id"]

        listing = client.get("/api/products?category=Spa", headers=stylist_headers)
        assert [p["id"] for p in listing.json["products"]] == [product_id]

        resp = client.patch(f"/api/products/{product_id}", headers=manager_headers, json={"price": -5})
        assert resp.status_code == 400

        assert client.delete(f"/api/products/{product_id}", headers=manager_headers).status_code == 200
        assert client.patch(f"/api/products/{product_id}", headers=manager_headers, json={}).status_code == 404

    def test_low_stock(self, client, supervisor_headers, haircut, pomade):
        resp = client.get("/api/products/low-stock", headers=supervisor_headers)
        assert [p["name"] for p in resp.json["products"]] == ["Matte Clay Pomade"]

    def test_reports(self, client, clock, stylist_headers, supervisor_headers, haircut):
        client.post("/api/transactions", headers=stylist_headers, json={
            "payment_method": "Cash", "items": [{"product_id": haircut.id, "quantity": 3}],
        })

        overview = client.get("/api/reports/overview", headers=supervisor_headers)
        assert overview.status_code == 200
        assert overview.json["total_sales"] == 15000

        hours = client.get("/api/reports/attendance-hours", headers=supervisor_headers)
        assert hours.json == {"staff": [], "count": 0}
