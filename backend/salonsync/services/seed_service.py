# Overview: Demo staff and catalog used to bootstrap an empty database.

from __future__ import annotations

from ..extensions import db
from ..models import StaffMember, Product
from .staff_service import hash_pin


DEMO_STAFF = [
    # (name, role, pin, job title)
    ("Sarah Manager", "MANAGER", "1111", "General Manager"),
    ("Mike Supervisor", "SUPERVISOR", "2222", "Floor Lead"),
    ("Jessica Stylist", "STAFF", "3333", "Hair Stylist"),
    ("David Barber", "STAFF", "4444", "Master Barber"),
    ("Lisa Tech", "STAFF", "5555", "Nail Technician"),
]

DEMO_CATALOG = [
    {"name": "Ladies Cut & Style", "price": 5000, "category": "Hair Salon", "sub_category": "Cutting"},
    {"name": "Full Weave Install", "price": 15000, "category": "Hair Salon", "sub_category": "Weaveon Section"},
    {"name": "Classic Cut", "price": 3000, "category": "Barbers", "sub_category": "Men's Wear"},
    {"name": "Beard Trim & Shape", "price": 2000, "category": "Barbers", "sub_category": "Men's Wear"},
    {"name": "Gel Manicure", "price": 4500, "category": "Nails & Foot Services", "sub_category": "Manicure"},
    {"name": "Pedicure Spa", "price": 6000, "category": "Nails & Foot Services", "sub_category": "Pedicure"},
    {"name": "Argan Oil Shampoo", "price": 4500, "category": "Retail Product", "sub_category": "Hair Care",
     "is_retail": True, "stock_level": 12, "min_reorder_point": 5},
    {"name": "Matte Clay Pomade", "price": 3500, "category": "Retail Product", "sub_category": "Men's Grooming",
     "is_retail": True, "stock_level": 3, "min_reorder_point": 5},
    {"name": "Cuticle Oil", "price": 1500, "category": "Retail Product", "sub_category": "Nail Care",
     "is_retail": True, "stock_level": 20, "min_reorder_point": 5},
]


def seed_demo_data() -> dict:
    """Insert demo staff/catalog into empty tables. Idempotent."""
    created = {"staff": 0, "products": 0}

    if db.session.query(StaffMember).count() == 0:
        for name, role, pin, job_title in DEMO_STAFF:
            db.session.add(StaffMember(name=name, role=role, job_title=job_title, pin_hash=hash_pin(pin)))
            created["staff"] += 1

    if db.session.query(Product).count() == 0:
        for item in DEMO_CATALOG:
            db.session.add(Product(**item))
            created["products"] += 1

    db.session.commit()
    return created
