from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

TRANSACTION_TYPES = ("sale", "credit", "debit")
PAYMENT_METHODS = ("cash", "card", "bank_transfer")


class Transaction(db.Model):
    """
    Append-only ledger of monetary events.

    TRANSACTION TYPES:
    - sale: Checkout of the cart (customer optional, anonymous cash sale otherwise)
    - credit: Money in favour of the customer
    - debit: Money owed by the customer

    IMMUTABLE: Records are never updated or deleted. amount_cents is always
    positive; direction is carried by type, never by sign. customer_id is a
    soft reference and survives deletion of the customer.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_customer_created", "customer_id", "created_at"),
        db.CheckConstraint("amount_cents > 0", name="ck_transactions_amount_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, nullable=True, index=True)  # soft reference to customers.id

    type = db.Column(db.String(16), nullable=False, index=True)  # sale, credit, debit
    amount_cents = db.Column(db.Integer, nullable=False)

    reference_note = db.Column(db.String(255), nullable=True)
    payment_method = db.Column(db.String(32), nullable=True)  # cash, card, bank_transfer

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "type": self.type,
            "amount_cents": self.amount_cents,
            "reference_note": self.reference_note,
            "payment_method": self.payment_method,
            "created_at": to_utc_z(self.created_at),
        }


class TransactionItem(db.Model):
    """
    Line items of a sale transaction.

    unit_price_cents is the price snapshot at checkout, decoupled from
    later product price changes.
    """
    __tablename__ = "transaction_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey("transactions.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, nullable=False, index=True)  # soft reference to products.id

    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    line_total_cents = db.Column(db.Integer, nullable=False)

    transaction = db.relationship("Transaction", backref=db.backref("items", lazy=True, order_by="TransactionItem.id"))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "line_total_cents": self.line_total_cents,
        }
