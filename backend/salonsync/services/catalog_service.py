# Overview: Service-layer operations for the product/service catalog.

from __future__ import annotations

from ..extensions import db
from ..models import Product, TransactionLine
from ..errors import ProductNotFound
from ..validation import PRODUCT_POLICY, validate_payload, enforce_rules_product
from .concurrency import storage_guard


_STATE_FIELDS = ("name", "price", "category", "sub_category", "is_retail", "stock_level", "min_reorder_point")


def get_product(product_id: int) -> Product:
    with storage_guard("product lookup"):
        product = db.session.get(Product, product_id)
    if product is None:
        raise ProductNotFound(details={"product_id": product_id})
    return product


def list_products(*, category: str | None = None, search: str | None = None) -> list[Product]:
    query = db.session.query(Product)
    if category:
        query = query.filter(Product.category == category)
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(db.or_(Product.name.ilike(like), Product.sub_category.ilike(like)))

    with storage_guard("product list"):
        return query.order_by(Product.category.asc(), Product.name.asc()).all()


def list_low_stock() -> list[Product]:
    """Retail items at or below their reorder point."""
    with storage_guard("low stock list"):
        return db.session.query(Product).filter(
            Product.is_retail.is_(True),
            Product.stock_level <= Product.min_reorder_point,
        ).order_by(Product.stock_level.asc(), Product.name.asc()).all()


def create_product(payload: dict) -> Product:
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    merged = {"sub_category": "", "is_retail": False, **patch}
    enforce_rules_product(merged)

    product = Product(**merged)
    with storage_guard("product create"):
        db.session.add(product)
        db.session.commit()
    return product


def update_product(product_id: int, payload: dict) -> Product:
    product = get_product(product_id)
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)

    merged = {f: getattr(product, f) for f in _STATE_FIELDS}
    merged.update(patch)
    enforce_rules_product(merged)

    for key, value in merged.items():
        setattr(product, key, value)
    with storage_guard("product update"):
        db.session.commit()
    return product


def delete_product(product_id: int) -> None:
    """Sold lines keep their name/category snapshot; product_id is cleared."""
    product = get_product(product_id)
    with storage_guard("product delete"):
        db.session.query(TransactionLine).filter_by(product_id=product.id).update(
            {"product_id": None}, synchronize_session=False
        )
        db.session.delete(product)
        db.session.commit()
