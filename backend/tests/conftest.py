"""
Pytest fixtures for SalonSync backend tests.

Provides a fresh in-memory database per test, staff and catalog fixtures,
PIN header helpers, and a controllable clock.
"""

from datetime import datetime

import pytest

from salonsync import create_app
from salonsync.config import TestConfig
from salonsync.extensions import db
from salonsync.models import StaffMember, Product
from salonsync.services.staff_service import hash_pin


T0 = datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture(scope='function')
def app():
    """Create application with an empty in-memory database."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    return db.session


def make_staff(name: str, role: str = "STAFF", pin: str = "3333", job_title: str = "") -> StaffMember:
    staff = StaffMember(name=name, role=role, job_title=job_title, pin_hash=hash_pin(pin))
    db.session.add(staff)
    db.session.commit()
    return staff


@pytest.fixture(scope='function')
def manager(db_session):
    return make_staff("Sarah Manager", role="MANAGER", pin="1111", job_title="General Manager")


@pytest.fixture(scope='function')
def supervisor(db_session):
    return make_staff("Mike Supervisor", role="SUPERVISOR", pin="2222", job_title="Floor Lead")


@pytest.fixture(scope='function')
def stylist(db_session):
    return make_staff("Jessica Stylist", role="STAFF", pin="3333", job_title="Hair Stylist")


@pytest.fixture(scope='function')
def haircut(db_session):
    """Non-retail service priced 5000."""
    product = Product(name="Ladies Cut & Style", price=5000, category="Hair Salon", sub_category="Cutting")
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def pomade(db_session):
    """Retail item already below its reorder point (3 <= 5)."""
    product = Product(
        name="Matte Clay Pomade",
        price=3500,
        category="Retail Product",
        sub_category="Men's Grooming",
        is_retail=True,
        stock_level=3,
        min_reorder_point=5,
    )
    db_session.add(product)
    db_session.commit()
    return product


def staff_headers(staff: StaffMember, pin: str) -> dict:
    """Helper to create X-Staff-Id / X-Staff-Pin headers."""
    return {'X-Staff-Id': str(staff.id), 'X-Staff-Pin': pin}


@pytest.fixture(scope='function')
def manager_headers(manager):
    return staff_headers(manager, "1111")


@pytest.fixture(scope='function')
def supervisor_headers(supervisor):
    return staff_headers(supervisor, "2222")


@pytest.fixture(scope='function')
def stylist_headers(stylist):
    return staff_headers(stylist, "3333")


class FrozenClock:
    """Mutable 'now' patched into the modules that read the time."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta) -> datetime:
        self.now = self.now + delta
        return self.now


@pytest.fixture(scope='function')
def clock(monkeypatch):
    frozen = FrozenClock(T0)
    for module in (
        "salonsync.services.token_service",
        "salonsync.services.clock_service",
        "salonsync.services.checkout_service",
    ):
        monkeypatch.setattr(f"{module}.utcnow", frozen)
    return frozen
