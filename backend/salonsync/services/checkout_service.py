# Overview: Service-layer operations for committing a POS sale.

"""
Transaction Commit Sequence

Steps:
1. Validate the cart (non-empty, quantity >= 1, price >= 0, known products),
   the payment method and the staff member.
2. Write the Transaction header (total = sum(price x quantity)) and commit.
3. Write one TransactionLine per cart line and commit. If this fails the
   header is deleted (compensating action) and the sale is reported failed:
   no header may remain visible without its lines.
4. Decrement stock for retail lines with one atomic UPDATE per product,
   clamped at zero. A failure here is logged and reported in the outcome
   but does not undo steps 2-3: the sale ledger is authoritative, stock
   counts are best-effort and corrected manually.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flask import current_app
from sqlalchemy import case
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Product, StaffMember, Transaction, TransactionLine, PAYMENT_METHODS
from ..errors import (
    EmptyCart,
    InvalidLine,
    InvalidPaymentMethod,
    StaffNotFound,
    StorageUnavailable,
)
from ..time_utils import utcnow
from ..validation import MAX_PRICE, MAX_QUANTITY, MAX_STORED_INT
from .concurrency import storage_guard


@dataclass
class CartLine:
    product_id: int
    quantity: int
    price: int | None = None  # None -> current catalog price

    @classmethod
    def from_dict(cls, data: dict, index: int = 0) -> "CartLine":
        if not isinstance(data, dict):
            raise InvalidLine(f"Line {index + 1} must be an object", details={"line": index})
        product_id = data.get("product_id", data.get("id"))
        return cls(product_id=product_id, quantity=data.get("quantity"), price=data.get("price"))


@dataclass
class _PricedLine:
    product: Product
    quantity: int
    price: int

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


@dataclass
class CommitOutcome:
    transaction: Transaction
    stock_updates: list[dict] = field(default_factory=list)
    stock_failures: list[dict] = field(default_factory=list)

    @property
    def message(self) -> str:
        msg = f"Sale #{self.transaction.id} recorded: {self.transaction.total_amount} via {self.transaction.payment_method}"
        if self.stock_failures:
            msg += f" ({len(self.stock_failures)} stock update(s) need manual correction)"
        return msg

    def to_dict(self) -> dict:
        return {
            "transaction": self.transaction.to_dict(),
            "stock_updates": self.stock_updates,
            "stock_failures": self.stock_failures,
            "message": self.message,
        }


def _is_whole_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_lines(cart_lines: list) -> list[_PricedLine]:
    if not cart_lines:
        raise EmptyCart()

    lines = [
        line if isinstance(line, CartLine) else CartLine.from_dict(line, i)
        for i, line in enumerate(cart_lines)
    ]

    priced: list[_PricedLine] = []
    for i, line in enumerate(lines):
        details = {"line": i, "product_id": line.product_id}

        if not _is_whole_number(line.quantity) or not 1 <= line.quantity <= MAX_QUANTITY:
            raise InvalidLine(f"Line {i + 1}: quantity must be a whole number from 1 to {MAX_QUANTITY}", details=details)
        if line.price is not None and (not _is_whole_number(line.price) or not 0 <= line.price <= MAX_PRICE):
            raise InvalidLine(f"Line {i + 1}: price must be a whole number from 0 to {MAX_PRICE}", details=details)
        if not _is_whole_number(line.product_id):
            raise InvalidLine(f"Line {i + 1}: product_id is required", details=details)

        with storage_guard("product lookup"):
            product = db.session.get(Product, line.product_id)
        if product is None:
            raise InvalidLine(f"Line {i + 1}: product {line.product_id} not found", details=details)

        price = product.price if line.price is None else line.price
        priced.append(_PricedLine(product=product, quantity=line.quantity, price=price))

    if sum(line.line_total for line in priced) > MAX_STORED_INT:
        raise InvalidLine("Cart total is too large", details={"lines": len(priced)})

    return priced


def _write_header(staff: StaffMember, lines: list[_PricedLine], payment_method: str) -> Transaction:
    header = Transaction(
        created_at=utcnow(),
        staff_id=staff.id,
        staff_name=staff.name,
        total_amount=sum(line.line_total for line in lines),
        payment_method=payment_method,
    )
    with storage_guard("transaction header write"):
        db.session.add(header)
        db.session.commit()
    return header


def _write_line_items(header: Transaction, lines: list[_PricedLine]) -> None:
    for line in lines:
        db.session.add(TransactionLine(
            transaction_id=header.id,
            product_id=line.product.id,
            product_name=line.product.name,
            category=line.product.category,
            is_retail=line.product.is_retail,
            quantity=line.quantity,
            price_at_sale=line.price,
            line_total=line.line_total,
        ))
    db.session.commit()


def _compensate_header(header_id: int) -> None:
    """Remove a header whose line items could not be written."""
    try:
        db.session.query(TransactionLine).filter_by(transaction_id=header_id).delete(synchronize_session=False)
        db.session.query(Transaction).filter_by(id=header_id).delete(synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception(
            "Compensating delete failed; transaction %s has no line items and needs manual removal",
            header_id,
        )
        raise


def decrement_stock(product_id: int, quantity: int) -> int | None:
    """
    Atomic "decrement by N, floor at 0" for one retail product.

    Returns the new stock level, or None if the product is not retail.
    """
    db.session.query(Product).filter(
        Product.id == product_id,
        Product.is_retail.is_(True),
    ).update(
        {
            Product.stock_level: case(
                (Product.stock_level > quantity, Product.stock_level - quantity),
                else_=0,
            )
        },
        synchronize_session=False,
    )
    db.session.commit()
    return db.session.query(Product.stock_level).filter(Product.id == product_id).scalar()


def _adjust_stock(header: Transaction, lines: list[_PricedLine], outcome: CommitOutcome) -> None:
    sold: dict[int, int] = {}
    for line in lines:
        if line.product.is_retail:
            sold[line.product.id] = sold.get(line.product.id, 0) + line.quantity

    for product_id, quantity in sold.items():
        try:
            new_level = decrement_stock(product_id, quantity)
            outcome.stock_updates.append({
                "product_id": product_id,
                "quantity": quantity,
                "stock_level": new_level,
            })
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(
                "Stock decrement failed for product %s (qty %s) on transaction %s: %s",
                product_id, quantity, header.id, exc,
            )
            outcome.stock_failures.append({
                "product_id": product_id,
                "quantity": quantity,
                "error": "Stock update failed",
            })


def commit_transaction(staff_id: int, cart_lines: list, payment_method: str) -> CommitOutcome:
    lines = _validate_lines(cart_lines)

    if payment_method not in PAYMENT_METHODS:
        raise InvalidPaymentMethod(details={"payment_method": payment_method})

    with storage_guard("staff lookup"):
        staff = db.session.get(StaffMember, staff_id) if staff_id is not None else None
    if staff is None:
        raise StaffNotFound(details={"staff_id": staff_id})

    header = _write_header(staff, lines, payment_method)
    header_id = header.id

    try:
        _write_line_items(header, lines)
    except Exception as exc:
        # Any failure here must not leave the header without its lines
        db.session.rollback()
        current_app.logger.error("Line item write failed for transaction %s: %s", header_id, exc)
        try:
            _compensate_header(header_id)
        except SQLAlchemyError as comp_exc:
            raise StorageUnavailable(
                "Sale failed and could not be rolled back",
                details={"transaction_id": header_id},
            ) from comp_exc
        raise StorageUnavailable(
            "Sale failed while writing line items; nothing was recorded",
        ) from exc

    outcome = CommitOutcome(transaction=header)
    _adjust_stock(header, lines, outcome)
    return outcome


def get_transaction(transaction_id: int) -> Transaction | None:
    with storage_guard("transaction lookup"):
        return db.session.get(Transaction, transaction_id)
