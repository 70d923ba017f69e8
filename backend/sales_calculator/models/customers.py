from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class Customer(db.Model):
    """
    Customer master data with a cached running balance.

    BALANCE: balance_cents always equals the signed sum of the customer's
    transactions (credit = +amount, debit/sale = -amount). Only the
    transaction ledger writes it; it starts at 0 on creation.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.Index("ix_customers_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    full_name = db.Column(db.String(255), nullable=False)
    phone_number = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    address = db.Column(db.Text, nullable=True)
    profile_image = db.Column(db.Text, nullable=True)

    # Denormalized aggregate (updated when transactions are recorded)
    balance_cents = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def __repr__(self) -> str:
        return f"<Customer id={self.id} full_name={self.full_name!r} balance_cents={self.balance_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "email": self.email,
            "address": self.address,
            "profile_image": self.profile_image,
            "balance_cents": self.balance_cents,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
