from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Maximum price: $9,999,999.99 (999,999,999 cents)
MAX_PRICE_CENTS = 999_999_999

# Quantities on hand and in a cart
MAX_QUANTITY = 1_000_000

# Largest single ledger amount: $9,999,999,999.99
MAX_AMOUNT_CENTS = 999_999_999_999

# SQLite INTEGER is a signed 64-bit value; anything wider overflows the driver
MAX_DB_INT = 2**63 - 1


class ValidationError(ValueError):
    """400-level input problem."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    What a client may send for one model:
    - writable_fields: keys accepted at all (anything else is rejected)
    - required_on_create: keys that must be present when creating
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)


def _parse_int(key: str, value: Any) -> int:
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    # bool is an int subclass
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be an integer")

    text = value.strip()
    if "e" in text.lower():
        raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
    if "." in text:
        raise ValidationError(f"{key} must be an integer (no decimals)")
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{key} must be an integer")


def _coerce_int(key: str, value: Any) -> int:
    number = _parse_int(key, value)
    if abs(number) > MAX_DB_INT:
        raise ValidationError(f"{key} is out of range")
    return number


def _clean_column_value(col, raw: Any):
    """Coerce one non-null value to the column's type and check its String/Text limits."""
    coltype = col.type

    if isinstance(coltype, Integer):
        return _coerce_int(col.key, raw)
    if isinstance(coltype, Boolean):
        return raw if isinstance(raw, bool) else bool(raw)
    if not isinstance(coltype, (String, Text)):
        return raw

    text = str(raw).strip()
    if text == "" and not col.nullable:
        raise ValidationError(f"{col.key} cannot be blank")
    limit = getattr(coltype, "length", None)
    if limit and len(text) > limit:
        raise ValidationError(f"{col.key} exceeds max length {limit}")
    return text


def parse_price_cents(value: Any) -> int:
    """
    Convert a decimal price ("29.99", 29.99, 30) into integer cents.

    Raises ValidationError for anything non-numeric or with sub-cent precision.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError("price must be numeric")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("price must be numeric")
    if not amount.is_finite():
        raise ValidationError("price must be numeric")
    cents = amount * 100
    if cents != cents.to_integral_value():
        raise ValidationError("price cannot have more than two decimal places")
    return int(cents)


def normalize_money_fields(payload: dict, *, field: str = "price", target: str = "price_cents") -> dict:
    """
    Replace a decimal ``field`` with its integer-cents ``target`` counterpart.

    Clients may send either; sending both is ambiguous and rejected.
    """
    if not isinstance(payload, dict) or field not in payload:
        return payload
    if target in payload:
        raise ValidationError(f"Send either {field} or {target}, not both")
    out = dict(payload)
    raw = out.pop(field)
    out[target] = None if raw is None else parse_price_cents(raw)
    return out


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Turn raw request JSON into a clean patch for ``model``.

    Keys are checked against the policy allowlist and then against the
    model's columns; values are coerced using the column type, nullability
    and String length. ``partial=False`` additionally requires every
    ``required_on_create`` key (create); ``partial=True`` validates only the
    keys provided (update).
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(policy.required_on_create - set(payload))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    columns = {c.key: c for c in model.__mapper__.columns}

    patch: dict = {}
    for key, raw in payload.items():
        if key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {key}")
        col = columns.get(key)
        if col is None:
            raise ValidationError(f"Unknown field: {key}")

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{key} cannot be null")
            patch[key] = None
        else:
            patch[key] = _clean_column_value(col, raw)

    return patch


def enforce_rules_product(patch: dict) -> None:
    """Price and stock rules that column metadata alone cannot express."""
    quantity = patch.get("quantity")
    if quantity is not None and abs(quantity) > MAX_QUANTITY:
        raise ValidationError(f"quantity cannot exceed {MAX_QUANTITY:,} in either direction")

    price = patch.get("price_cents")
    if price is None:
        return
    if not isinstance(price, int):
        raise ValidationError("price_cents must be an integer")
    if price < 0:
        raise ValidationError("price must be numeric and non-negative")
    if price > MAX_PRICE_CENTS:
        raise ValidationError(f"price_cents cannot exceed {MAX_PRICE_CENTS} (${MAX_PRICE_CENTS / 100:,.2f})")


def enforce_rules_customer(patch: dict) -> None:
    email = patch.get("email")
    if email and "@" not in email:
        raise ValidationError("email must contain '@'")


def validate_int(value: Any, *, key: str = "quantity", max_value: int = MAX_DB_INT) -> int:
    """
    Ids, quantities and cent amounts arrive as JSON numbers or numeric strings.

    The magnitude must not exceed ``max_value``; negatives are left to the
    caller (cart quantities <= 0 mean "remove").
    """
    if value is None:
        raise ValidationError(f"{key} is required")
    number = _coerce_int(key, value)
    if abs(number) > max_value:
        raise ValidationError(f"{key} cannot exceed {max_value:,}")
    return number
