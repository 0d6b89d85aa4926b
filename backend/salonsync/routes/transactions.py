# backend/salonsync/routes/transactions.py
"""Checkout and transaction history."""

from flask import Blueprint, request, jsonify, g, current_app

from .. import core
from ..errors import SalonSyncError, ValidationError
from ..decorators import require_staff, error_response
from ..services import checkout_service, reporting_service


transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.post("")
@require_staff("pos")
def commit_transaction_route():
    """
    Record a completed sale for the calling staff member.

    Request body:
    {
        "payment_method": "Cash" | "Card" | "Transfer",
        "items": [{"product_id": 1, "quantity": 2, "price": 5000}, ...]
    }
    `price` is optional and defaults to the catalog price.
    """
    data = request.get_json(silent=True) or {}
    items = data.get("items")
    if items is not None and not isinstance(items, list):
        return error_response(ValidationError("items must be a list"))

    result = core.commit_transaction(g.current_staff.id, items or [], data.get("payment_method"))
    return jsonify(result.to_dict()), result.http_status


@transactions_bp.get("")
@require_staff("reports")
def list_transactions_route():
    """
    Query params: start, end (ISO dates, inclusive), staff_id, payment_method.
    """
    try:
        transactions = reporting_service.list_transactions(
            start=request.args.get("start"),
            end=request.args.get("end"),
            staff_id=request.args.get("staff_id", type=int),
            payment_method=request.args.get("payment_method"),
        )
        return jsonify({
            "transactions": [t.to_dict() for t in transactions],
            "count": len(transactions),
            "total_amount": sum(t.total_amount for t in transactions),
        })
    except SalonSyncError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list transactions")
        return jsonify({"error": "Internal server error"}), 500


@transactions_bp.get("/<int:transaction_id>")
@require_staff("reports")
def get_transaction_route(transaction_id: int):
    try:
        transaction = checkout_service.get_transaction(transaction_id)
    except SalonSyncError as e:
        return error_response(e)
    if transaction is None:
        return jsonify({"error": "Transaction not found", "code": "TRANSACTION_NOT_FOUND"}), 404
    return jsonify({"transaction": transaction.to_dict()})
