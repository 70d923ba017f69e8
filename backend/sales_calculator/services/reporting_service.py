# Overview: Service-layer operations for reporting; simple aggregate sums for the dashboard.

from __future__ import annotations

from sqlalchemy import func, case

from ..extensions import db
from ..models import Customer, Product, Transaction


def _sum_for_type(tx_type: str):
    return func.coalesce(
        func.sum(case((Transaction.type == tx_type, Transaction.amount_cents), else_=0)),
        0,
    )


def get_sales_summary() -> dict:
    """Transaction count and per-type totals over the whole ledger."""
    row = db.session.query(
        func.count(Transaction.id).label("total_transactions"),
        _sum_for_type("sale").label("total_sales_cents"),
        _sum_for_type("credit").label("total_credits_cents"),
        _sum_for_type("debit").label("total_debits_cents"),
    ).one()

    return {
        "total_transactions": int(row.total_transactions or 0),
        "total_sales_cents": int(row.total_sales_cents or 0),
        "total_credits_cents": int(row.total_credits_cents or 0),
        "total_debits_cents": int(row.total_debits_cents or 0),
    }


def get_outstanding_balance_cents() -> int:
    """
    Money owed by customers: the sum of negative balances, as a positive number.
    """
    owed = (
        db.session.query(func.coalesce(func.sum(Customer.balance_cents), 0))
        .filter(Customer.balance_cents < 0)
        .scalar()
    )
    return -int(owed or 0)


def get_dashboard_stats() -> dict:
    stats = {
        "total_customers": db.session.query(func.count(Customer.id)).scalar() or 0,
        "total_products": db.session.query(func.count(Product.id)).scalar() or 0,
        "outstanding_balance_cents": get_outstanding_balance_cents(),
    }
    stats.update(get_sales_summary())
    return stats
