# Overview: Flask API route for dashboard aggregates.

from flask import Blueprint, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..services import reporting_service

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("")
def dashboard_stats_route():
    try:
        return jsonify(reporting_service.get_dashboard_stats())
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load dashboard data")
        return jsonify({"error": "Failed to load dashboard data"}), 500
