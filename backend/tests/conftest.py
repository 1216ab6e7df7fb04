"""
Pytest fixtures for OrderHub backend tests.

Provides a file-backed SQLite database (the unit of work opens its own
connections, so every test must see committed data), caller identities
and a small seeded catalog.
"""

from decimal import Decimal

import pytest
from orderhub import create_app
from orderhub.extensions import db
from orderhub.models import Item, Login, Stock
from orderhub.observability import UseCaseObserver
from orderhub.schemas import Identity, Role
from orderhub.services.auth_service import hash_password


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    db_path = tmp_path_factory.mktemp("data") / "orderhub-test.sqlite3"
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{db_path}",
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SECRET_KEY': 'test-secret-key',
        'STORED_PROCEDURE_MODE': 'embedded',
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


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


@pytest.fixture
def admin():
    return Identity(id=1, username="admin", email="admin@orderhub.local", role=Role.ADMIN)


@pytest.fixture
def alice():
    return Identity(id=2, username="alice", email="alice@example.com", role=Role.USER)


@pytest.fixture
def bob():
    return Identity(id=3, username="bob", email="bob@example.com", role=Role.USER)


def make_item(db_session, code, name, price, quantity, created_by=1, location="A-01", **kwargs):
    """Insert an item and its stock row directly (bypassing the procedures)."""
    item = Item(
        item_name=name,
        item_code=code,
        category=kwargs.pop("category", "General"),
        unit_price=Decimal(price),
        created_by=created_by,
        **kwargs,
    )
    item.stock = Stock(quantity_available=quantity, warehouse_location=location, created_by=created_by)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture
def catalog(db_session):
    """Three active items: a widget (10.00), a gadget (2.50) and a low-stock gizmo."""
    return {
        "widget": make_item(db_session, "WID-1", "Widget", "10.00", 100),
        "gadget": make_item(db_session, "GAD-1", "Gadget", "2.50", 50),
        "gizmo": make_item(db_session, "GIZ-1", "Gizmo", "99.99", 3),
    }


@pytest.fixture
def login_factory(db_session):
    """Create Login rows with a real bcrypt hash."""
    def _make(username, password="secret123", email=None, is_admin=False, **kwargs):
        login = Login(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(password),
            is_admin=is_admin,
            **kwargs,
        )
        db_session.add(login)
        db_session.commit()
        return login
    return _make


class RecordingObserver(UseCaseObserver):
    """Collects (event, use case name) pairs."""

    def __init__(self):
        self.events = []

    def on_start(self, name, identity):
        self.events.append(("start", name))

    def on_success(self, name, identity, response):
        self.events.append(("success", name))

    def on_failure(self, name, identity, response=None, exc=None):
        self.events.append(("failure", name))


@pytest.fixture
def observer():
    return RecordingObserver()


def order_payload(*lines, name="Jane Customer", email="jane@example.com"):
    return {
        "customerName": name,
        "customerEmail": email,
        "orderItems": [{"itemId": item_id, "quantity": qty} for item_id, qty in lines],
    }
