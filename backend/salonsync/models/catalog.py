from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

SERVICE_CATEGORIES = (
    "Hair Salon",
    "Barbers",
    "Nails & Foot Services",
    "Spa",
    "Laundry",
    "Retail Product",
)


class Product(db.Model):
    """
    Catalog entry: either a service (haircut, manicure) or a retail product.

    RETAIL INVARIANT:
    - stock_level and min_reorder_point are set iff is_retail is true.
    - stock_level never goes negative; sales clamp it at zero.

    Prices are whole currency units as printed on the menu (e.g. 5000).
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        db.CheckConstraint("stock_level IS NULL OR stock_level >= 0", name="ck_products_stock_non_negative"),
        db.CheckConstraint(
            "(is_retail AND stock_level IS NOT NULL AND min_reorder_point IS NOT NULL) OR "
            "(NOT is_retail AND stock_level IS NULL AND min_reorder_point IS NULL)",
            name="ck_products_retail_stock_fields",
        ),
        db.Index("ix_products_category", "category"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(64), nullable=False)
    sub_category = db.Column(db.String(120), nullable=False, default="")

    is_retail = db.Column(db.Boolean, nullable=False, default=False)
    stock_level = db.Column(db.Integer, nullable=True)
    min_reorder_point = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} retail={self.is_retail}>"

    @property
    def is_low_stock(self) -> bool:
        if not self.is_retail or self.stock_level is None or self.min_reorder_point is None:
            return False
        return self.stock_level <= self.min_reorder_point

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "sub_category": self.sub_category,
            "is_retail": self.is_retail,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if self.is_retail:
            data["stock_level"] = self.stock_level
            data["min_reorder_point"] = self.min_reorder_point
            data["is_low_stock"] = self.is_low_stock
        return data
