# backend/sales_calculator/routes/system.py
"""
System health endpoint.
"""

import time
from flask import Blueprint, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Customer, Product, Transaction
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "customers": db.session.query(Customer).count(),
            "products": db.session.query(Product).count(),
            "transactions": db.session.query(Transaction).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except SQLAlchemyError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    status_code = 200 if database["status"] == "healthy" else 503
    return {
        "status": database["status"],
        "checked_at": to_utc_z(utcnow()),
        "database": database,
    }, status_code
