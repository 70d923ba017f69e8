# Overview: Flask API route for checkout; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..exceptions import (
    EmptyCartError,
    InsufficientStockError,
    NotFoundError,
    StorageError,
)
from ..services import checkout_service
from ..validation import ValidationError, validate_int

checkout_bp = Blueprint("checkout", __name__, url_prefix="/api/checkout")


@checkout_bp.post("")
def checkout_route():
    """
    Convert the cart into a sale.

    Body: customer_id?, payment_method (default "cash"), reference_note?, cart_id?
    Returns: total_cents of the recorded sale.
    """
    data = request.get_json(silent=True) or {}

    try:
        customer_id = data.get("customer_id")
        if customer_id is not None:
            customer_id = validate_int(customer_id, key="customer_id")
        cart_id = data.get("cart_id")
        if cart_id is not None:
            cart_id = validate_int(cart_id, key="cart_id")

        total_cents = checkout_service.checkout(
            customer_id=customer_id,
            payment_method=data.get("payment_method") or "cash",
            note=data.get("reference_note") or "",
            cart_id=cart_id,
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e), "details": e.details}), 404
    except (EmptyCartError, InsufficientStockError) as e:
        return jsonify({"error": str(e), "details": e.details}), 409
    except StorageError as e:
        current_app.logger.exception("Failed to checkout")
        return jsonify({"error": str(e)}), 500

    return jsonify({"total_cents": total_cents}), 201
