from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class Cart(db.Model):
    """
    A till's pending purchase.

    Single-till installs use the one cart named "default"; additional carts
    can be created per register without touching the cart functions.
    """
    __tablename__ = "carts"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_carts_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())


class CartLine(db.Model):
    """
    Pending quantity of one product in a cart.

    product_id is a soft reference; name and price are resolved from the
    product at read time, so the displayed price is always the live one.
    INVARIANT: quantity >= 1 (lines that would drop to 0 are deleted).
    """
    __tablename__ = "cart_lines"
    __table_args__ = (
        db.UniqueConstraint("cart_id", "product_id", name="uq_cart_lines_cart_product"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.Integer, db.ForeignKey("carts.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, nullable=False, index=True)  # soft reference to products.id
    quantity = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    cart = db.relationship("Cart", backref=db.backref("lines", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cart_id": self.cart_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "created_at": to_utc_z(self.created_at),
        }
