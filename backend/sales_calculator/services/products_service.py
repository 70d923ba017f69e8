# backend/sales_calculator/services/products_service.py
"""
Products Service

Catalog CRUD. No business validation happens here (a negative price is
stored as given); the routes enforce input rules before calling in.
"""
from __future__ import annotations

import logging

from ..extensions import db
from ..exceptions import NotFoundError
from ..models import Product, CartLine
from .storage import atomic

logger = logging.getLogger(__name__)

PRODUCT_MUTABLE_FIELDS = {"name", "price_cents", "quantity", "description", "image"}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _require_product(product_id: int) -> Product:
    p = db.session.query(Product).filter(Product.id == product_id).first()
    if not p:
        raise NotFoundError("Product not found", details={"product_id": product_id})
    return p


def list_products() -> list[dict]:
    """All products, newest first."""
    products = (
        db.session.query(Product)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )
    return [p.to_dict() for p in products]


def get_product(product_id: int) -> dict:
    return _require_product(product_id).to_dict()


def create_product(*, patch: dict, allow_explicit_id: bool = False) -> int:
    """
    Create product using a validated patch dict.

    Args:
        patch: Product data (name, price_cents, quantity, ...)
        allow_explicit_id: Honor patch["id"] (bootstrap/seed data only)

    Returns:
        The new product id
    """
    with atomic("create product"):
        p = Product()
        if allow_explicit_id and patch.get("id") is not None:
            p.id = patch["id"]
        apply_product_patch(p, patch)
        if p.price_cents is None:
            p.price_cents = 0
        if p.quantity is None:
            p.quantity = 0
        db.session.add(p)
        db.session.flush()  # ensure p.id exists before commit
        product_id = p.id

    logger.info("Created product id=%s", product_id)
    return product_id


def update_product(*, product_id: int, patch: dict) -> dict:
    """
    Update a product.

    Args:
        product_id: Product ID to update
        patch: Fields to update; anything else keeps its prior value

    Returns:
        Updated product dict

    Raises:
        NotFoundError: If the product does not exist
    """
    with atomic("update product"):
        p = _require_product(product_id)
        apply_product_patch(p, patch)

    return p.to_dict()


def delete_product(*, product_id: int) -> bool:
    """
    Delete a product.

    Cart lines pointing at the product are removed in the same transaction;
    sale line items keep their product_id as a historical reference.
    """
    with atomic("delete product"):
        p = _require_product(product_id)
        removed = (
            db.session.query(CartLine)
            .filter(CartLine.product_id == product_id)
            .delete(synchronize_session="fetch")
        )
        db.session.delete(p)

    logger.info("Deleted product id=%s (removed %s cart lines)", product_id, removed)
    return True
