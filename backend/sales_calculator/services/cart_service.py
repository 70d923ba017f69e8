# Overview: Service-layer operations for the cart; encapsulates business logic and database work.

from __future__ import annotations

from ..extensions import db
from ..exceptions import NotFoundError
from ..models import Cart, CartLine, Product
from ..validation import MAX_QUANTITY, ValidationError
from .storage import atomic

"""
Cart Invariants (authoritative)

- A cart line's quantity is always >= 1; any request that would leave it at
  0 or below deletes the line instead.
- At most one line per (cart, product); repeat adds increment it.
- Prices shown for cart lines are live product prices. The frozen unit price
  is recorded only at checkout (TransactionItem).
- Every function takes an explicit cart_id; None means the installation's
  default cart.
"""

DEFAULT_CART_NAME = "default"


def ensure_default_cart() -> Cart:
    """
    Ensure the installation has its default cart.

    Safe to call repeatedly (idempotent). Flushes but does not commit.
    """
    cart = db.session.query(Cart).filter_by(name=DEFAULT_CART_NAME).first()
    if cart:
        return cart

    cart = Cart(name=DEFAULT_CART_NAME)
    db.session.add(cart)
    db.session.flush()
    return cart


def create_cart(name: str) -> int:
    """Open an additional named cart (e.g. one per register)."""
    with atomic("create cart"):
        cart = Cart(name=name)
        db.session.add(cart)
        db.session.flush()
        cart_id = cart.id
    return cart_id


def resolve_cart(cart_id: int | None = None, *, create: bool = True) -> Cart | None:
    """
    Look up the cart to operate on.

    cart_id=None resolves to the default cart, created on demand when
    ``create`` is set. An explicit unknown cart_id raises NotFoundError.
    """
    if cart_id is None:
        if create:
            return ensure_default_cart()
        return db.session.query(Cart).filter_by(name=DEFAULT_CART_NAME).first()

    cart = db.session.query(Cart).filter_by(id=cart_id).first()
    if not cart:
        raise NotFoundError("Cart not found", details={"cart_id": cart_id})
    return cart


def add_to_cart(product_id: int, quantity: int = 1, cart_id: int | None = None) -> int | None:
    """
    Find-or-create the product's line and increment it by ``quantity``.

    Returns the cart line id, or None when the resulting quantity is <= 0
    and the line was removed (or never created).

    Raises:
        NotFoundError: If the product (or an explicit cart) does not exist
        ValidationError: If the line would exceed MAX_QUANTITY
    """
    with atomic("add to cart"):
        cart = resolve_cart(cart_id)

        product = db.session.query(Product).filter_by(id=product_id).first()
        if not product:
            raise NotFoundError("Product not found", details={"product_id": product_id})

        line = (
            db.session.query(CartLine)
            .filter_by(cart_id=cart.id, product_id=product_id)
            .first()
        )

        if line is None:
            if quantity <= 0:
                return None
            line = CartLine(cart_id=cart.id, product_id=product_id, quantity=quantity)
            db.session.add(line)
        else:
            line.quantity = line.quantity + quantity
            if line.quantity <= 0:
                db.session.delete(line)
                return None

        if line.quantity > MAX_QUANTITY:
            raise ValidationError(f"quantity cannot exceed {MAX_QUANTITY:,}")

        db.session.flush()
        line_id = line.id

    return line_id


def load_cart_rows(cart_id: int):
    return (
        db.session.query(CartLine, Product)
        .join(Product, Product.id == CartLine.product_id)
        .filter(CartLine.cart_id == cart_id)
        .order_by(CartLine.id.asc())
        .all()
    )


def list_cart(cart_id: int | None = None) -> list[dict]:
    """Cart lines joined with each product's current name, price and image."""
    cart = resolve_cart(cart_id, create=False)
    if cart is None:
        return []

    items = []
    for line, product in load_cart_rows(cart.id):
        item = line.to_dict()
        item.update({
            "name": product.name,
            "price_cents": product.price_cents,
            "image": product.image,
            "line_total_cents": line.quantity * product.price_cents,
        })
        items.append(item)
    return items


def cart_total_cents(cart_id: int | None = None) -> int:
    """Live total of the cart at current product prices."""
    return sum(item["line_total_cents"] for item in list_cart(cart_id))


def set_cart_quantity(line_id: int, quantity: int) -> bool:
    """
    Overwrite a line's quantity.

    quantity <= 0 behaves exactly like remove_from_cart(line_id).

    Raises:
        NotFoundError: If quantity > 0 and the line does not exist
    """
    if quantity <= 0:
        return remove_from_cart(line_id)
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"quantity cannot exceed {MAX_QUANTITY:,}")

    with atomic("update cart quantity"):
        line = db.session.query(CartLine).filter_by(id=line_id).first()
        if not line:
            raise NotFoundError("Cart line not found", details={"line_id": line_id})
        line.quantity = quantity

    return True


def remove_from_cart(line_id: int) -> bool:
    """Delete a cart line. No-op (returns False) if it does not exist."""
    with atomic("remove cart line"):
        deleted = db.session.query(CartLine).filter_by(id=line_id).delete(synchronize_session="fetch")
    return bool(deleted)


def clear_cart_lines(cart_id: int) -> int:
    """Delete every line of a cart inside the caller's transaction (no commit)."""
    return (
        db.session.query(CartLine)
        .filter(CartLine.cart_id == cart_id)
        .delete(synchronize_session="fetch")
    )


def clear_cart(cart_id: int | None = None) -> int:
    """Delete all lines unconditionally; returns how many were removed."""
    with atomic("clear cart"):
        cart = resolve_cart(cart_id, create=False)
        if cart is None:
            return 0
        removed = clear_cart_lines(cart.id)
    return removed
