from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

PAYMENT_METHODS = ("Cash", "Card", "Transfer")


class Transaction(db.Model):
    """
    A completed sale (header).

    IMMUTABLE: written once by the checkout sequence, never updated.
    The only delete is the compensating delete when line items fail to write.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.CheckConstraint("payment_method IN ('Cash', 'Card', 'Transfer')", name="ck_transactions_payment"),
        db.Index("ix_transactions_created", "created_at"),
        db.Index("ix_transactions_staff_created", "staff_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False)

    staff_id = db.Column(db.Integer, db.ForeignKey("staff_members.id", ondelete="SET NULL"), nullable=True, index=True)
    # Snapshot so history survives staff removal
    staff_name = db.Column(db.String(120), nullable=False)

    total_amount = db.Column(db.Integer, nullable=False)
    payment_method = db.Column(db.String(16), nullable=False)

    lines = db.relationship(
        "TransactionLine",
        backref="transaction",
        lazy=True,
        order_by="TransactionLine.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_lines: bool = True) -> dict:
        data = {
            "id": self.id,
            "created_at": to_utc_z(self.created_at),
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "total_amount": self.total_amount,
            "payment_method": self.payment_method,
        }
        if include_lines:
            data["items"] = [line.to_dict() for line in self.lines]
        return data


class TransactionLine(db.Model):
    """Line item with the price captured at sale time."""
    __tablename__ = "transaction_lines"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_transaction_lines_quantity"),
        db.CheckConstraint("price_at_sale >= 0", name="ck_transaction_lines_price"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey("transactions.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)

    product_name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(64), nullable=False)
    is_retail = db.Column(db.Boolean, nullable=False, default=False)

    quantity = db.Column(db.Integer, nullable=False)
    price_at_sale = db.Column(db.Integer, nullable=False)
    line_total = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "category": self.category,
            "is_retail": self.is_retail,
            "quantity": self.quantity,
            "price_at_sale": self.price_at_sale,
            "line_total": self.line_total,
        }
