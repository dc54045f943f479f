"""
Pytest fixtures for the back-office service tests.

Every test gets its own app bound to a fresh in-memory SQLite database
(foreign keys enforced), with the default admin already bootstrapped.
"""

from datetime import datetime

import pytest

from reparto import create_app
from reparto.extensions import db
from reparto.models import Client, Expense, InventoryLine, Product, Transaction, User
from reparto.services.auth_service import hash_password
from reparto.time_utils import utcnow


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'BCRYPT_ROUNDS': 4,
        'DEFAULT_ADMIN_PASSWORD': 'admin',
        'SEED_ENABLED': True,
    })

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    return db.session


@pytest.fixture(scope='function')
def admin(db_session):
    """The bootstrap administrator (id=1)."""
    return db_session.get(User, 1)


@pytest.fixture(scope='function')
def make_user(db_session):
    def _make(username, name=None, hierarchy=2, password="secreto1", status="Active"):
        user = User(
            username=username,
            name=name or username.title(),
            hierarchy=hierarchy,
            password_hash=hash_password(password),
            status=status,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture(scope='function')
def seller(make_user):
    return make_user("vendedor", name="Carlos Ruiz")


@pytest.fixture(scope='function')
def make_client(db_session, admin):
    def _make(description, reference_dni=None, reference_name=None, balance=0, **extra):
        row = Client(
            description=description,
            reference_dni=reference_dni,
            reference_name=reference_name,
            balance=balance,
            modified_by_user_id=admin.id,
            **extra,
        )
        db_session.add(row)
        db_session.commit()
        return row
    return _make


@pytest.fixture(scope='function')
def customer(make_client):
    return make_client("Almacen Don Pepe", reference_dni="20887123", reference_name="Jose Perez", balance=5000)


@pytest.fixture(scope='function')
def make_product(db_session, admin):
    def _make(description, price=1500, status="Active"):
        product = Product(description=description, price=price, status=status, user_id=admin.id)
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture(scope='function')
def make_transaction(db_session):
    def _make(client_row, user, total, cash=0, card=0, bot=0, debt=0, created_at: datetime | None = None, lines=()):
        transaction = Transaction(
            client_id=client_row.id,
            user_id=user.id,
            total=total,
            cash_paid=cash,
            card_paid=card,
            bot_paid=bot,
            debt=debt,
            created_at=created_at or utcnow(),
        )
        db_session.add(transaction)
        db_session.flush()
        for product, quantity in lines:
            db_session.add(InventoryLine(
                transaction_id=transaction.id,
                product_id=product.id,
                quantity=quantity,
                unit_cost=product.price,
            ))
        db_session.commit()
        return transaction
    return _make


@pytest.fixture(scope='function')
def make_expense(db_session):
    def _make(user, amount, category="combustible", description=None, created_at: datetime | None = None):
        expense = Expense(
            user_id=user.id,
            amount=amount,
            category=category,
            description=description,
            created_at=created_at or utcnow(),
        )
        db_session.add(expense)
        db_session.commit()
        return expense
    return _make
