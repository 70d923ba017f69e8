"""
Checkout Service - converts a cart into a recorded sale

One checkout is one DB transaction: the sale transaction, its line items,
the inventory decrements and the cart clear are committed together or not
at all.
"""

from __future__ import annotations

import logging

from flask import current_app

from ..extensions import db
from ..exceptions import EmptyCartError, InsufficientStockError
from ..models import TransactionItem
from .cart_service import resolve_cart, clear_cart_lines, load_cart_rows
from .storage import atomic, begin_write_lock
from .transactions_service import append_transaction

logger = logging.getLogger(__name__)


def _allow_oversell() -> bool:
    return bool(current_app.config.get("ALLOW_OVERSELL", True))


def _validate_on_hand(rows) -> None:
    insufficient = []
    for line, product in rows:
        if product.quantity < line.quantity:
            insufficient.append({
                "product_id": product.id,
                "requested_quantity": line.quantity,
                "on_hand": product.quantity,
            })

    if insufficient:
        raise InsufficientStockError(
            "Insufficient inventory to complete checkout",
            details={"items": insufficient},
        )


def _decrement_stock(product, quantity: int) -> None:
    product.quantity = product.quantity - quantity


def checkout(
    customer_id: int | None = None,
    payment_method: str = "cash",
    note: str = "",
    cart_id: int | None = None,
    allow_oversell: bool | None = None,
) -> int:
    """
    Check the cart out and return the total in cents.

    Steps (all-or-nothing):
    1. Read the cart lines; EmptyCartError if there are none.
    2. total = sum(line.quantity * current product price).
    3. Append one "sale" transaction (linked to customer_id if given) and a
       TransactionItem per line with the unit price snapshot.
    4. Decrement each product's quantity on hand by the line quantity.
    5. Clear the cart.

    Raises:
        EmptyCartError: The cart has no lines
        InsufficientStockError: Oversell disabled and a line exceeds stock
        NotFoundError: customer_id (or an explicit cart_id) is unknown
        ValidationError: Bad payment method, a zero total, or a total above MAX_AMOUNT_CENTS
        StorageError: Any database failure (everything is rolled back)
    """
    if allow_oversell is None:
        allow_oversell = _allow_oversell()

    with atomic("checkout"):
        begin_write_lock()

        cart = resolve_cart(cart_id, create=False)
        rows = load_cart_rows(cart.id) if cart is not None else []
        if not rows:
            raise EmptyCartError("Cart is empty", details={"cart_id": cart_id})

        if not allow_oversell:
            _validate_on_hand(rows)

        total_cents = sum(line.quantity * product.price_cents for line, product in rows)

        tx = append_transaction(
            tx_type="sale",
            amount_cents=total_cents,
            customer_id=customer_id,
            note=note,
            payment_method=payment_method,
        )

        for line, product in rows:
            db.session.add(TransactionItem(
                transaction_id=tx.id,
                product_id=product.id,
                quantity=line.quantity,
                unit_price_cents=product.price_cents,
                line_total_cents=line.quantity * product.price_cents,
            ))
            _decrement_stock(product, line.quantity)

        clear_cart_lines(cart.id)
        tx_id = tx.id

    logger.info("Checkout completed: transaction id=%s total_cents=%s lines=%s customer_id=%s",
                tx_id, total_cents, len(rows), customer_id)
    return total_cents
