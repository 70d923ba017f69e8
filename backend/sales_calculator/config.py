# backend/sales_calculator/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/sales_calculator.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///sales_calculator.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Checkout may drive quantity on hand below zero unless this is off
    ALLOW_OVERSELL = _env_flag("ALLOW_OVERSELL", True)

    # sale transactions reduce a linked customer's balance like a debit
    SALE_AFFECTS_BALANCE = _env_flag("SALE_AFFECTS_BALANCE", True)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    SEED_SAMPLE_DATA = _env_flag("SEED_SAMPLE_DATA", False)
