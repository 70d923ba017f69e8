# Overview: Flask API routes for cart operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import NotFoundError, StorageError
from ..services import cart_service
from ..validation import MAX_QUANTITY, ValidationError, validate_int

cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


@cart_bp.get("")
def list_cart_route():
    """
    Cart lines joined with live product name/price/image, plus the live total.

    Query params:
    - cart_id: int (optional) - defaults to the installation's cart
    """
    cart_id = request.args.get("cart_id", type=int)
    try:
        items = cart_service.list_cart(cart_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load cart")
        return jsonify({"items": [], "count": 0, "total_cents": 0, "error": "Failed to load cart"})

    return jsonify({
        "items": items,
        "count": len(items),
        "total_cents": sum(item["line_total_cents"] for item in items),
    })


@cart_bp.post("/lines")
def add_to_cart_route():
    data = request.get_json(silent=True) or {}
    product_id = data.get("product_id")
    if product_id is None:
        return jsonify({"error": "product_id required"}), 400

    try:
        product_id = validate_int(product_id, key="product_id")
        quantity = validate_int(data.get("quantity", 1), max_value=MAX_QUANTITY)
        cart_id = data.get("cart_id")
        if cart_id is not None:
            cart_id = validate_int(cart_id, key="cart_id")
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        line_id = cart_service.add_to_cart(product_id, quantity, cart_id=cart_id)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e), "details": e.details}), 404
    except StorageError as e:
        current_app.logger.exception("Failed to add to cart")
        return jsonify({"error": str(e)}), 500

    return jsonify({"line_id": line_id}), 201


@cart_bp.put("/lines/<int:line_id>")
def set_cart_quantity_route(line_id: int):
    """Overwrite a line's quantity; 0 or below removes the line."""
    data = request.get_json(silent=True) or {}
    try:
        quantity = validate_int(data.get("quantity"), max_value=MAX_QUANTITY)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        cart_service.set_cart_quantity(line_id, quantity)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e), "details": e.details}), 404
    except StorageError as e:
        current_app.logger.exception("Failed to update cart quantity")
        return jsonify({"error": str(e)}), 500

    return jsonify({"ok": True}), 200


@cart_bp.delete("/lines/<int:line_id>")
def remove_from_cart_route(line_id: int):
    try:
        removed = cart_service.remove_from_cart(line_id)
    except StorageError as e:
        current_app.logger.exception("Failed to remove item")
        return jsonify({"error": str(e)}), 500

    return jsonify({"ok": True, "removed": removed}), 200


@cart_bp.delete("")
def clear_cart_route():
    cart_id = request.args.get("cart_id", type=int)
    try:
        removed = cart_service.clear_cart(cart_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except StorageError as e:
        current_app.logger.exception("Failed to clear cart")
        return jsonify({"error": str(e)}), 500

    return jsonify({"ok": True, "removed": removed}), 200
