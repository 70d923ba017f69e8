# Overview: Flask API routes for the transaction ledger; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import NotFoundError, StorageError
from ..services import transactions_service
from ..validation import MAX_AMOUNT_CENTS, ValidationError, normalize_money_fields, validate_int

"""
The ledger is append-only: there is no PUT or DELETE here. Corrections are
posted as new offsetting credit/debit entries.
"""

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.get("")
def list_transactions_route():
    """
    All transactions newest first, each with customer_name.

    Query params:
    - customer_id: int (optional) - only this customer's transactions
    """
    customer_id = request.args.get("customer_id", type=int)
    try:
        if customer_id is not None:
            items = transactions_service.list_customer_transactions(customer_id)
        else:
            items = transactions_service.list_transactions()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load transactions")
        return jsonify({"items": [], "count": 0, "error": "Failed to load transactions"})

    return jsonify({"items": items, "count": len(items)})


@transactions_bp.post("")
def record_transaction_route():
    """
    Record a credit or debit (or a manual sale) against an optional customer.

    Body: type, amount (decimal) or amount_cents (int), customer_id?,
    reference_note?, payment_method?
    """
    data = request.get_json(silent=True) or {}

    try:
        data = normalize_money_fields(data, field="amount", target="amount_cents")
        amount_raw = data.get("amount_cents")
        amount_cents = validate_int(amount_raw, key="amount_cents", max_value=MAX_AMOUNT_CENTS)
        customer_id = data.get("customer_id")
        if customer_id is not None:
            customer_id = validate_int(customer_id, key="customer_id")
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        tx_id = transactions_service.record_transaction(
            data.get("type"),
            amount_cents,
            customer_id=customer_id,
            note=data.get("reference_note"),
            payment_method=data.get("payment_method"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e), "details": e.details}), 404
    except StorageError as e:
        current_app.logger.exception("Failed to record transaction")
        return jsonify({"error": str(e)}), 500

    return jsonify({"id": tx_id}), 201


@transactions_bp.get("/<int:transaction_id>/items")
def get_transaction_items_route(transaction_id: int):
    try:
        items = transactions_service.get_transaction_items(transaction_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"items": items, "count": len(items)})
