# Overview: Bootstrap data for a fresh install (sample customers and products).

from __future__ import annotations

from ..extensions import db
from ..models import Customer, Product
from .cart_service import ensure_default_cart
from .customers_service import create_customer
from .products_service import create_product
from .storage import atomic

SAMPLE_CUSTOMERS = [
    {"id": 1, "full_name": "John Doe", "phone_number": "+1234567890",
     "email": "john@example.com", "address": "123 Main St, City"},
    {"id": 2, "full_name": "Jane Smith", "phone_number": "+0987654321",
     "email": "jane@example.com", "address": "456 Oak Ave, Town"},
]

SAMPLE_PRODUCTS = [
    {"id": 1, "name": "Laptop", "price_cents": 99999, "quantity": 10,
     "description": "High-performance laptop"},
    {"id": 2, "name": "Mouse", "price_cents": 2999, "quantity": 50,
     "description": "Wireless optical mouse"},
    {"id": 3, "name": "Keyboard", "price_cents": 7999, "quantity": 25,
     "description": "Mechanical keyboard"},
]


def seed_sample_data() -> dict:
    """
    Insert the sample rows that are not there yet (matched by id).

    Safe to call repeatedly (idempotent). Also ensures the default cart.
    """
    created = {"customers": 0, "products": 0}

    for row in SAMPLE_CUSTOMERS:
        if db.session.query(Customer).filter_by(id=row["id"]).first():
            continue
        create_customer(patch=row, allow_explicit_id=True)
        created["customers"] += 1

    for row in SAMPLE_PRODUCTS:
        if db.session.query(Product).filter_by(id=row["id"]).first():
            continue
        create_product(patch=row, allow_explicit_id=True)
        created["products"] += 1

    with atomic("ensure default cart"):
        ensure_default_cart()

    return created
