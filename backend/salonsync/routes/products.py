# backend/salonsync/routes/products.py
"""
Catalog routes.

- Any staff member can read the catalog (the POS grid).
- Low-stock list is for SUPERVISOR/MANAGER.
- Writes are MANAGER only.
"""

from flask import Blueprint, request, jsonify, current_app

from ..errors import SalonSyncError
from ..decorators import require_staff, error_response
from ..services import catalog_service


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_staff("pos")
def list_products_route():
    """Query params: category, q (name/sub-category search)."""
    try:
        products = catalog_service.list_products(
            category=request.args.get("category"),
            search=request.args.get("q"),
        )
        return jsonify({"products": [p.to_dict() for p in products], "count": len(products)})
    except SalonSyncError as e:
        return error_response(e)


@products_bp.get("/low-stock")
@require_staff("reports")
def low_stock_route():
    try:
        products = catalog_service.list_low_stock()
        return jsonify({"products": [p.to_dict() for p in products], "count": len(products)})
    except SalonSyncError as e:
        return error_response(e)


@products_bp.post("")
@require_staff("admin")
def create_product_route():
    try:
        product = catalog_service.create_product(request.get_json(silent=True) or {})
        return jsonify({"product": product.to_dict()}), 201
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.patch("/<int:product_id>")
@require_staff("admin")
def update_product_route(product_id: int):
    try:
        product = catalog_service.update_product(product_id, request.get_json(silent=True) or {})
        return jsonify({"product": product.to_dict()})
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.delete("/<int:product_id>")
@require_staff("admin")
def delete_product_route(product_id: int):
    try:
        catalog_service.delete_product(product_id)
        return jsonify({"deleted": product_id})
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Internal server error"}), 500
