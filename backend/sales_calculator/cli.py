# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/sales_calculator/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables and the default cart (idempotent).
# - python -m flask system seed
#   Insert the sample customers and products that are missing (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Ledger inspection:
# - python -m flask ledger balance 1
#   Print a customer's cached balance next to the balance folded from history.
# - python -m flask ledger stats
#   Print the dashboard aggregates.

import click
from flask.cli import with_appcontext

from .extensions import db
from .exceptions import NotFoundError
from .services.cart_service import ensure_default_cart
from .services.customers_service import get_customer
from .services.reporting_service import get_dashboard_stats
from .services.seed_service import seed_sample_data
from .services.storage import atomic
from .services.transactions_service import compute_customer_balance
from .time_utils import format_cents


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables and make sure the default cart exists."""
    db.create_all()
    with atomic("ensure default cart"):
        cart = ensure_default_cart()
    click.echo(f"PASS Database ready (default cart ID: {cart.id})")


@system_group.command('seed')
@with_appcontext
def seed():
    """Insert sample customers and products (skips rows that already exist)."""
    db.create_all()
    created = seed_sample_data()
    click.echo(
        f"PASS Seeded {created['customers']} customers, {created['products']} products"
    )


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system seed' for sample data.")


@click.group('ledger')
def ledger_group():
    """Ledger inspection commands."""


@ledger_group.command('balance')
@click.argument('customer_id', type=int)
@with_appcontext
def balance(customer_id):
    """Show cached vs. folded balance for a customer."""
    try:
        customer = get_customer(customer_id)
    except NotFoundError as e:
        raise click.ClickException(str(e))

    cached = customer["balance_cents"]
    folded = compute_customer_balance(customer_id)
    click.echo(f"Customer: {customer['full_name']} (ID: {customer_id})")
    click.echo(f"  cached balance: {format_cents(cached)}")
    click.echo(f"  folded balance: {format_cents(folded)}")
    if cached != folded:
        click.echo("FAIL Cached balance does not match transaction history")
        raise SystemExit(1)
    click.echo("PASS Balance consistent with transaction history")


@ledger_group.command('stats')
@with_appcontext
def stats():
    """Print dashboard aggregates."""
    data = get_dashboard_stats()
    click.echo(f"Customers:           {data['total_customers']}")
    click.echo(f"Products:            {data['total_products']}")
    click.echo(f"Transactions:        {data['total_transactions']}")
    click.echo(f"Total sales:         {format_cents(data['total_sales_cents'])}")
    click.echo(f"Total credits:       {format_cents(data['total_credits_cents'])}")
    click.echo(f"Total debits:        {format_cents(data['total_debits_cents'])}")
    click.echo(f"Outstanding balance: {format_cents(data['outstanding_balance_cents'])}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(ledger_group)
