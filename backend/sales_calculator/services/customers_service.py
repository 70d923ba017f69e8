# Overview: Service-layer operations for customers; encapsulates business logic and database work.

from __future__ import annotations

import logging

from ..extensions import db
from ..exceptions import NotFoundError
from ..models import Customer
from .storage import atomic

logger = logging.getLogger(__name__)

# balance_cents is written only by the transaction ledger.
CUSTOMER_MUTABLE_FIELDS = {"full_name", "phone_number", "email", "address", "profile_image"}


def apply_customer_patch(c: Customer, patch: dict) -> None:
    for k, v in patch.items():
        if k not in CUSTOMER_MUTABLE_FIELDS:
            continue
        setattr(c, k, v)


def _require_customer(customer_id: int) -> Customer:
    c = db.session.query(Customer).filter(Customer.id == customer_id).first()
    if not c:
        raise NotFoundError("Customer not found", details={"customer_id": customer_id})
    return c


def list_customers() -> list[dict]:
    """All customers, newest first."""
    customers = (
        db.session.query(Customer)
        .order_by(Customer.created_at.desc(), Customer.id.desc())
        .all()
    )
    return [c.to_dict() for c in customers]


def get_customer(customer_id: int) -> dict:
    return _require_customer(customer_id).to_dict()


def create_customer(*, patch: dict, allow_explicit_id: bool = False) -> int:
    """
    Create a customer and return its id.

    A caller-supplied "id" is ignored unless allow_explicit_id is set
    (bootstrap/seed data only). The balance always starts at 0.
    """
    with atomic("create customer"):
        c = Customer(balance_cents=0)
        if allow_explicit_id and patch.get("id") is not None:
            c.id = patch["id"]
        apply_customer_patch(c, patch)
        db.session.add(c)
        db.session.flush()
        customer_id = c.id

    logger.info("Created customer id=%s", customer_id)
    return customer_id


def update_customer(*, customer_id: int, patch: dict) -> dict:
    """
    Partial update: fields absent from the patch keep their prior values.

    Raises:
        NotFoundError: If the customer does not exist
    """
    with atomic("update customer"):
        c = _require_customer(customer_id)
        apply_customer_patch(c, patch)

    return c.to_dict()


def delete_customer(*, customer_id: int) -> bool:
    """
    Hard-delete a customer.

    Historical transactions keep their customer_id and are still listed;
    their customer name falls back to the walk-in placeholder.
    """
    with atomic("delete customer"):
        c = _require_customer(customer_id)
        db.session.delete(c)

    logger.info("Deleted customer id=%s", customer_id)
    return True
