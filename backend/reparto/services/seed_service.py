# Overview: Deterministic test-data population for non-production environments.

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Client, Expense, InventoryLine, Product, Transaction, User
from ..time_utils import utcnow
from ..validation import ConflictError, StorageError, STATUS_ACTIVE, STATUS_INACTIVE
from .auth_service import ensure_default_admin, hash_password

SEED_PASSWORD = "vendedor123"

SEED_USERS = [
    # username, name, hierarchy, dni, phone
    ("vendedor1", "Carlos Ruiz", 2, "30111222", "1155550001"),
    ("vendedor2", "Lucia Gomez", 2, "28887333", "1155550002"),
]

SEED_CLIENTS = [
    # description, reference name, reference dni, address, lat/long
    ("Almacen Don Pepe", "Jose Perez", "20887123", "Av. Mitre 120", "-34.6037,-58.3816"),
    ("Kiosco La Esquina", "Marta Diaz", "27445190", "San Martin 455", "-34.6101,-58.3770"),
    ("Panaderia Sol", "Ruben Sosa", "23990412", "Belgrano 78", "-34.6150,-58.3702"),
    ("Verduleria Norte", "Ana Ibarra", "31228876", "Rivadavia 1903", "-34.6093,-58.3921"),
    ("Bar El Puerto", None, None, "Costanera 3", None),
]

SEED_PRODUCTS = [
    # description, price, status
    ("Bidon agua 20L", 1500, STATUS_ACTIVE),
    ("Sifon soda x6", 2200, STATUS_ACTIVE),
    ("Dispenser frio/calor (alquiler)", 5000, STATUS_ACTIVE),
    ("Bidon agua 12L", 1000, STATUS_INACTIVE),
]

SEED_EXPENSES = [
    # days ago, category, description, amount
    (0, "combustible", "Carga nafta camioneta", 800),
    (1, "mecanico", "Cambio de aceite", 2500),
    (3, "otros", "Peaje", 300),
    (5, "combustible", "Carga nafta camioneta", 750),
]

DAYS = 7


def populate_test_data(today: date | None = None) -> dict:
    """
    Insert a fixed demo data set spread over the last DAYS days.

    Everything is written in one database transaction; on any failure the
    session is rolled back and nothing is kept, including a default admin
    created on the way. Refuses to run twice.
    """
    today = today or utcnow().date()

    usernames = [u[0] for u in SEED_USERS]
    if db.session.query(User).filter(User.username.in_(usernames)).first():
        raise ConflictError("Test data already populated")

    counts = {"users": 0, "clients": 0, "products": 0, "transactions": 0, "inventory_lines": 0, "expenses": 0}
    try:
        ensure_default_admin(commit=False)
        password_hash = hash_password(SEED_PASSWORD)
        users = [
            User(username=username, name=name, hierarchy=hierarchy, dni=dni, phone=phone,
                 password_hash=password_hash, status=STATUS_ACTIVE)
            for username, name, hierarchy, dni, phone in SEED_USERS
        ]
        db.session.add_all(users)
        db.session.flush()
        counts["users"] = len(users)

        clients = [
            Client(description=desc, reference_name=ref_name, reference_dni=ref_dni, address=address,
                   last_lat_long=lat_long, balance=0, modified_by_user_id=users[0].id)
            for desc, ref_name, ref_dni, address, lat_long in SEED_CLIENTS
        ]
        products = [
            Product(description=desc, price=price, status=status, user_id=users[0].id)
            for desc, price, status in SEED_PRODUCTS
        ]
        db.session.add_all(clients + products)
        db.session.flush()
        counts["clients"] = len(clients)
        counts["products"] = len(products)

        sellable = [p for p in products if p.status == STATUS_ACTIVE]
        for day_offset in range(DAYS):
            day = today - timedelta(days=day_offset)
            for slot in range(2):
                index = day_offset * 2 + slot
                user = users[index % len(users)]
                client = clients[index % len(clients)]
                product = sellable[index % len(sellable)]
                quantity = 1 + index % 3
                total = product.price * quantity
                cash = total if slot == 0 else total // 2
                card = 0 if slot == 0 else total - cash - (200 if index % 4 == 1 else 0)
                debt = total - cash - card

                transaction = Transaction(
                    client_id=client.id,
                    user_id=user.id,
                    total=total,
                    cash_paid=cash,
                    card_paid=card,
                    bot_paid=0,
                    debt=debt,
                    lat_long=client.last_lat_long,
                    created_at=datetime.combine(day, time(9 + slot * 4, 15)),
                )
                db.session.add(transaction)
                db.session.flush()
                db.session.add(InventoryLine(
                    transaction_id=transaction.id,
                    product_id=product.id,
                    quantity=quantity,
                    unit_cost=product.price,
                ))
                client.balance -= debt
                counts["transactions"] += 1
                counts["inventory_lines"] += 1

        for days_ago, category, description, amount in SEED_EXPENSES:
            db.session.add(Expense(
                user_id=users[days_ago % len(users)].id,
                category=category,
                description=description,
                amount=amount,
                created_at=datetime.combine(today - timedelta(days=days_ago), time(18, 0)),
            ))
            counts["expenses"] += 1

        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Test data population failed; rolled back")
        raise StorageError(f"Test data population failed: {exc}") from exc

    current_app.logger.info("Test data populated: %s", counts)
    return counts
