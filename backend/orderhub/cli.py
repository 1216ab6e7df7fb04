# Overview: Flask CLI command groups for bootstrap, user management and sample data.

# backend/orderhub/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to orderhub (PowerShell: $env:FLASK_APP="orderhub").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables (idempotent). Prefer "flask db upgrade" where migrations are used.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users create --username admin --email admin@orderhub.local --password "Password123" --admin
#   Create a login (prompts if options are omitted). --admin grants the Admin role.
# - python -m flask users list
#   List all logins with role and active status.
#
# Inventory:
# - python -m flask inventory seed --admin-username admin
#   Create a handful of sample catalog items with initial stock.

from decimal import Decimal

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Login
from .schemas import Identity, Role
from .services import auth_service, inventory_service


SAMPLE_ITEMS = [
    ("Wireless Mouse", "ELEC-001", "Electronics", Decimal("24.99"), 150, "A-01"),
    ("Mechanical Keyboard", "ELEC-002", "Electronics", Decimal("89.00"), 40, "A-02"),
    ("USB-C Cable 1m", "ELEC-003", "Electronics", Decimal("9.50"), 8, "A-03"),
    ("A4 Copy Paper (500)", "OFF-001", "Office", Decimal("6.75"), 300, "B-01"),
    ("Desk Lamp", "OFF-002", "Office", Decimal("32.00"), 0, "B-02"),
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created.")


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

    click.echo("PASS Database reset complete. Run 'python -m flask users create --admin' to add an administrator.")


@click.group('users')
def users_group():
    """User management commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--admin', 'is_admin', is_flag=True, help='Grant the Admin role')
@with_appcontext
def create_user_cli(username, email, password, is_admin):
    """
    Create a new login.

    Goes through the same sign-up path as self-registration (validation,
    bcrypt hashing, duplicate checks). --admin then promotes the login.
    """
    response = auth_service.register(username, email, password)
    if not response.ok:
        click.echo(f"FAIL Failed to create user: {response.message}")
        raise SystemExit(1)

    if is_admin:
        login = db.session.query(Login).filter_by(username=response.data.username).one()
        login.is_admin = True
        db.session.commit()

    role = "Admin" if is_admin else "User"
    click.echo(f"PASS Created user: {username} ({email}) with role '{role}'")
    click.echo("SECURITY Password securely hashed with bcrypt")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all logins with their role."""
    logins = db.session.query(Login).order_by(Login.id).all()

    if not logins:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Username':<20} {'Email':<35} {'Role':<8} {'Active'}")
    click.echo("="*90)

    for login in logins:
        role = "Admin" if login.is_admin else "User"
        active_str = "Yes" if login.is_active and not login.is_deleted else "No"
        click.echo(f"{login.id:<5} {login.username:<20} {login.email:<35} {role:<8} {active_str}")

    click.echo("="*90 + "\n")


@click.group('inventory')
def inventory_group():
    """Inventory sample data commands."""


@inventory_group.command('seed')
@click.option('--admin-username', default='admin', help='Admin login recorded as creator')
@with_appcontext
def seed_inventory(admin_username):
    """Create sample catalog items with stock. Existing item codes are skipped."""
    login = db.session.query(Login).filter_by(username=admin_username, is_admin=True).first()
    if not login:
        click.echo(f"FAIL No admin login named '{admin_username}'. Run 'python -m flask users create --admin' first.")
        raise SystemExit(1)

    identity = Identity(id=login.id, username=login.username, email=login.email, role=Role.ADMIN)

    for name, code, category, price, quantity, location in SAMPLE_ITEMS:
        response = inventory_service.create_item(identity, {
            "itemName": name,
            "itemCode": code,
            "category": category,
            "unitPrice": price,
            "initialQuantity": quantity,
            "warehouseLocation": location,
        })
        if response.ok:
            click.echo(f"PASS Created {code} {name} (qty {quantity})")
        else:
            click.echo(f"SKIP {code}: {response.message}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(inventory_group)
