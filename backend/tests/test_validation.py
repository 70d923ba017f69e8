import pytest

from sales_calculator.models import Customer, Product
from sales_calculator.validation import (
    MAX_PRICE_CENTS,
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_customer,
    enforce_rules_product,
    normalize_money_fields,
    parse_price_cents,
    validate_int,
    validate_payload,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "price_cents", "quantity", "description", "image"},
    required_on_create={"name", "price_cents", "quantity"},
)


@pytest.mark.parametrize("raw, cents", [
    ("29.99", 2999),
    ("10", 1000),
    (30, 3000),
    ("0.5", 50),
    (" 1.10 ", 110),
])
def test_parse_price_cents(raw, cents):
    assert parse_price_cents(raw) == cents


@pytest.mark.parametrize("raw", ["abc", "", None, True, "nan", "inf", "1.234"])
def test_parse_price_cents_rejects(raw):
    with pytest.raises(ValidationError):
        parse_price_cents(raw)


def test_normalize_money_fields():
    assert normalize_money_fields({"name": "x", "price": "2.50"}) == {"name": "x", "price_cents": 250}
    assert normalize_money_fields({"price_cents": 250}) == {"price_cents": 250}

    with pytest.raises(ValidationError, match="not both"):
        normalize_money_fields({"price": "1", "price_cents": 100})


def test_validate_payload_create_requires_fields(app):
    with pytest.raises(ValidationError, match="Missing required fields: price_cents, quantity"):
        validate_payload(model=Product, payload={"name": "x"}, policy=PRODUCT_POLICY, partial=False)


def test_validate_payload_partial_coerces(app):
    patch = validate_payload(
        model=Product,
        payload={"quantity": "7", "name": "  Mouse  "},
        policy=PRODUCT_POLICY,
        partial=True,
    )
    assert patch == {"quantity": 7, "name": "Mouse"}


@pytest.mark.parametrize("payload, message", [
    ({"id": 5}, "Field not allowed: id"),
    ({"quantity": 1.5}, "quantity must be an integer"),
    ({"quantity": "1e3"}, "scientific notation"),
    ({"name": None}, "name cannot be null"),
    ({"name": ""}, "name cannot be blank"),
    ({"name": "x" * 256}, "exceeds max length 255"),
])
def test_validate_payload_rejects(app, payload, message):
    with pytest.raises(ValidationError, match=message):
        validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)


def test_validate_payload_customer_nullable_fields(app):
    policy = ModelValidationPolicy(writable_fields={"full_name", "email"})
    patch = validate_payload(model=Customer, payload={"email": None}, policy=policy, partial=True)
    assert patch == {"email": None}


def test_enforce_rules_product():
    enforce_rules_product({"price_cents": 0})
    enforce_rules_product({"price_cents": MAX_PRICE_CENTS})

    with pytest.raises(ValidationError, match="non-negative"):
        enforce_rules_product({"price_cents": -1})
    with pytest.raises(ValidationError, match="cannot exceed"):
        enforce_rules_product({"price_cents": MAX_PRICE_CENTS + 1})


def test_enforce_rules_customer():
    enforce_rules_customer({"email": "john@example.com"})
    enforce_rules_customer({"email": None})
    with pytest.raises(ValidationError):
        enforce_rules_customer({"email": "not-an-email"})


def test_validate_int():
    assert validate_int("3") == 3
    with pytest.raises(ValidationError, match="customer_id is required"):
        validate_int(None, key="customer_id")
    with pytest.raises(ValidationError):
        validate_int(True)


def test_integers_are_bounded():
    with pytest.raises(ValidationError, match="out of range"):
        validate_int(10**20, key="amount_cents")
    with pytest.raises(ValidationError, match="cannot exceed"):
        validate_int("7", max_value=5)
    assert validate_int(-5, max_value=5) == -5

    with pytest.raises(ValidationError, match="quantity cannot exceed"):
        enforce_rules_product({"quantity": 1_000_001})
