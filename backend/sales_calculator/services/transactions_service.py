# Overview: Service-layer operations for the transaction ledger; encapsulates business logic and database work.

from __future__ import annotations

import logging

from flask import current_app

from ..extensions import db
from ..exceptions import NotFoundError
from ..models import Customer, Transaction, TransactionItem, TRANSACTION_TYPES, PAYMENT_METHODS
from ..validation import MAX_AMOUNT_CENTS, ValidationError
from .storage import atomic

logger = logging.getLogger(__name__)

"""
Ledger Invariants (authoritative)

- Append-only: transactions are never updated or deleted here. Corrections
  are new offsetting transactions.
- amount_cents > 0 always; the direction of the money is the type.
- A linked customer's cached balance is adjusted in the same DB transaction
  as the append:
    credit -> +amount
    debit  -> -amount
    sale   -> -amount (or 0 when SALE_AFFECTS_BALANCE is off)
- compute_customer_balance() folds the history with the same rule and must
  agree with Customer.balance_cents.
"""

ANONYMOUS_CUSTOMER_NAME = "Walk-in customer"


def _sale_affects_balance() -> bool:
    return bool(current_app.config.get("SALE_AFFECTS_BALANCE", True))


def balance_delta(tx_type: str, amount_cents: int, *, sale_affects_balance: bool | None = None) -> int:
    """Signed effect of one transaction on the customer's balance."""
    if sale_affects_balance is None:
        sale_affects_balance = _sale_affects_balance()

    if tx_type == "credit":
        return amount_cents
    if tx_type == "debit":
        return -amount_cents
    if tx_type == "sale":
        return -amount_cents if sale_affects_balance else 0
    raise ValidationError(f"type must be one of: {', '.join(TRANSACTION_TYPES)}")


def _validate(tx_type: str, amount_cents, payment_method: str | None) -> None:
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(TRANSACTION_TYPES)}")
    if not isinstance(amount_cents, int) or isinstance(amount_cents, bool):
        raise ValidationError("amount_cents must be an integer")
    if amount_cents <= 0:
        raise ValidationError("amount_cents must be > 0")
    if amount_cents > MAX_AMOUNT_CENTS:
        raise ValidationError(f"amount_cents cannot exceed {MAX_AMOUNT_CENTS:,}")
    if payment_method is not None and payment_method not in PAYMENT_METHODS:
        raise ValidationError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")


def append_transaction(
    *,
    tx_type: str,
    amount_cents: int,
    customer_id: int | None = None,
    note: str | None = None,
    payment_method: str | None = None,
) -> Transaction:
    """
    Append a ledger row and apply its balance effect inside the caller's
    DB transaction (flush only, no commit).

    Raises:
        ValidationError: Bad type, amount or payment method
        NotFoundError: customer_id given but unknown
    """
    _validate(tx_type, amount_cents, payment_method)

    customer = None
    if customer_id is not None:
        customer = db.session.query(Customer).filter_by(id=customer_id).first()
        if not customer:
            raise NotFoundError("Customer not found", details={"customer_id": customer_id})

    tx = Transaction(
        customer_id=customer_id,
        type=tx_type,
        amount_cents=amount_cents,
        reference_note=note or None,
        payment_method=payment_method,
    )
    db.session.add(tx)

    if customer is not None:
        customer.balance_cents = (customer.balance_cents or 0) + balance_delta(tx_type, amount_cents)

    db.session.flush()  # ensures tx.id is assigned without committing
    return tx


def record_transaction(
    tx_type: str,
    amount_cents: int,
    customer_id: int | None = None,
    note: str | None = None,
    payment_method: str | None = None,
) -> int:
    """Record a standalone ledger entry (credit, debit or manual sale) and return its id."""
    with atomic("record transaction"):
        tx = append_transaction(
            tx_type=tx_type,
            amount_cents=amount_cents,
            customer_id=customer_id,
            note=note,
            payment_method=payment_method,
        )
        tx_id = tx.id

    logger.info("Recorded %s transaction id=%s amount_cents=%s customer_id=%s",
                tx_type, tx_id, amount_cents, customer_id)
    return tx_id


def _serialize(tx: Transaction, customer_name: str | None) -> dict:
    data = tx.to_dict()
    data["customer_name"] = customer_name or ANONYMOUS_CUSTOMER_NAME
    data["items"] = [item.to_dict() for item in tx.items]
    return data


def _annotated_query():
    return (
        db.session.query(Transaction, Customer.full_name)
        .outerjoin(Customer, Customer.id == Transaction.customer_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
    )


def list_transactions() -> list[dict]:
    """All transactions, newest first, annotated with the customer's name."""
    return [_serialize(tx, name) for tx, name in _annotated_query().all()]


def list_customer_transactions(customer_id: int) -> list[dict]:
    """One customer's transactions, newest first. Works after the customer is deleted."""
    rows = _annotated_query().filter(Transaction.customer_id == customer_id).all()
    return [_serialize(tx, name) for tx, name in rows]


def compute_customer_balance(customer_id: int) -> int:
    """
    Fold the customer's full history into a balance.

    Independent of the cached Customer.balance_cents; used to verify it.
    """
    sale_affects_balance = _sale_affects_balance()
    rows = (
        db.session.query(Transaction.type, Transaction.amount_cents)
        .filter(Transaction.customer_id == customer_id)
        .order_by(Transaction.id.asc())
        .all()
    )
    balance = 0
    for tx_type, amount_cents in rows:
        balance += balance_delta(tx_type, amount_cents, sale_affects_balance=sale_affects_balance)
    return balance


def get_transaction_items(transaction_id: int) -> list[dict]:
    tx = db.session.query(Transaction).filter_by(id=transaction_id).first()
    if not tx:
        raise NotFoundError("Transaction not found", details={"transaction_id": transaction_id})
    items = (
        db.session.query(TransactionItem)
        .filter(TransactionItem.transaction_id == transaction_id)
        .order_by(TransactionItem.id.asc())
        .all()
    )
    return [item.to_dict() for item in items]
