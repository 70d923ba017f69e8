# Overview: Flask API routes for customer operations; parses input and returns JSON responses.

from flask import Blueprint, request, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import NotFoundError, StorageError
from ..models import Customer
from ..services import customers_service, transactions_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_customer,
    ValidationError,
)

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"full_name", "phone_number", "email", "address", "profile_image"},
    required_on_create={"full_name"},
)

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
def list_customers_route():
    """List all customers, newest first. Degrades to an empty list on storage failure."""
    try:
        items = customers_service.list_customers()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load customers")
        return {"items": [], "count": 0, "error": "Failed to load customers"}
    return {"items": items, "count": len(items)}


@customers_bp.get("/<int:customer_id>")
def get_customer_route(customer_id: int):
    try:
        return {"customer": customers_service.get_customer(customer_id)}
    except NotFoundError as e:
        return {"error": str(e)}, 404


@customers_bp.post("")
def create_customer_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
        enforce_rules_customer(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        customer_id = customers_service.create_customer(patch=patch)
    except StorageError as e:
        current_app.logger.exception("Failed to create customer")
        return {"error": str(e)}, 500

    return {"id": customer_id, "customer": customers_service.get_customer(customer_id)}, 201


@customers_bp.put("/<int:customer_id>")
def update_customer_route(customer_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=True)
        enforce_rules_customer(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated = customers_service.update_customer(customer_id=customer_id, patch=patch)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except StorageError as e:
        current_app.logger.exception("Failed to update customer")
        return {"error": str(e)}, 500

    return {"customer": updated}, 200


@customers_bp.delete("/<int:customer_id>")
def delete_customer_route(customer_id: int):
    try:
        customers_service.delete_customer(customer_id=customer_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except StorageError as e:
        current_app.logger.exception("Failed to delete customer")
        return {"error": str(e)}, 500

    return {"ok": True}, 200


@customers_bp.get("/<int:customer_id>/transactions")
def list_customer_transactions_route(customer_id: int):
    """
    A customer's transactions newest first, with the cached balance and
    the balance folded from history.
    """
    try:
        customer = customers_service.get_customer(customer_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    try:
        items = transactions_service.list_customer_transactions(customer_id)
        computed_balance_cents = transactions_service.compute_customer_balance(customer_id)
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load customer transactions")
        return {"items": [], "count": 0, "error": "Failed to load customer transactions"}

    return {
        "customer": customer,
        "balance_cents": customer["balance_cents"],
        "computed_balance_cents": computed_balance_cents,
        "items": items,
        "count": len(items),
    }
