# Overview: Flask API routes for product operations; parses input and returns JSON responses.

# backend/sales_calculator/routes/products.py
"""
Product catalog routes.

Input rules live here, not in the service: name is required, price must be
numeric and non-negative. Clients may send "price" as a decimal (29.99) or
"price_cents" as an integer (2999).
"""
from flask import Blueprint, request, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import NotFoundError, StorageError
from ..models import Product
from ..services import products_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    normalize_money_fields,
    enforce_rules_product,
    ValidationError,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "price_cents", "quantity", "description", "image"},
    required_on_create={"name", "price_cents", "quantity"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _validated_patch(payload: dict, *, partial: bool) -> dict:
    payload = normalize_money_fields(payload)
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=partial)
    enforce_rules_product(patch)
    return patch


@products_bp.get("")
def list_products_route():
    """List all products, newest first. Degrades to an empty list on storage failure."""
    try:
        items = products_service.list_products()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load products")
        return {"items": [], "count": 0, "error": "Failed to load products"}
    return {"items": items, "count": len(items)}


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    try:
        return {"product": products_service.get_product(product_id)}
    except NotFoundError as e:
        return {"error": str(e)}, 404


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = _validated_patch(payload, partial=False)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        product_id = products_service.create_product(patch=patch)
    except StorageError as e:
        current_app.logger.exception("Failed to create product")
        return {"error": str(e)}, 500

    return {"id": product_id, "product": products_service.get_product(product_id)}, 201


@products_bp.put("/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = _validated_patch(payload, partial=True)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated = products_service.update_product(product_id=product_id, patch=patch)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except StorageError as e:
        current_app.logger.exception("Failed to update product")
        return {"error": str(e)}, 500

    return {"product": updated}, 200


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    """Delete a product; any cart lines for it are removed too."""
    try:
        products_service.delete_product(product_id=product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except StorageError as e:
        current_app.logger.exception("Failed to delete product")
        return {"error": str(e)}, 500

    return {"ok": True}, 200
