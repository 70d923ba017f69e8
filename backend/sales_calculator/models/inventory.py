from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class Product(db.Model):
    """
    Product catalog entry with its quantity on hand.

    quantity is decremented by checkout and may go negative when oversell
    is allowed; it is otherwise changed only by direct edits.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        db.Index("ix_products_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.Text, nullable=True)

    # Authoritative storage in cents (frontend may only format for display)
    price_cents = db.Column(db.Integer, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "price_cents": self.price_cents,
            "quantity": self.quantity,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
