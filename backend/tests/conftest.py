"""
Pytest fixtures for sales_calculator backend tests.

Provides an in-memory database app, a per-test clean database, a test
client, and small factories for products and customers.
"""

import pytest

from sales_calculator import create_app
from sales_calculator.extensions import db
from sales_calculator.services import customers_service, products_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'ALLOW_OVERSELL': True,
        'SALE_AFFECTS_BALANCE': True,
        'SEED_SAMPLE_DATA': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: create a product and return its id."""
    def _make(name="Widget", price_cents=1000, quantity=10, **extra):
        patch = {"name": name, "price_cents": price_cents, "quantity": quantity}
        patch.update(extra)
        return products_service.create_product(patch=patch)
    return _make


@pytest.fixture(scope='function')
def make_customer(db_session):
    """Factory: create a customer and return its id."""
    def _make(full_name="John Doe", **extra):
        patch = {"full_name": full_name}
        patch.update(extra)
        return customers_service.create_customer(patch=patch)
    return _make
