"""
Transaction, inventory line and expense tests, including window filters.
"""

from datetime import timedelta

from reparto.models import InventoryLine, Transaction
from reparto.time_utils import utcnow


class TestRegisterTransaction:

    def test_register_round_trip(self, client, customer, seller, db_session):
        resp = client.post("/registerTransaction", json={
            "client_id": customer.id,
            "user_id": seller.id,
            "total": 3000,
            "cash_paid": 1000,
            "card_paid": 1500,
            "bot_paid": 0,
            "debt": 500,
            "lat_long": "-34.6,-58.3",
        })
        assert resp.status_code == 200
        transaction = db_session.get(Transaction, resp.get_json()["transaction_id"])
        assert transaction.total == 3000
        assert transaction.cash_paid == 1000
        assert transaction.card_paid == 1500
        assert transaction.debt == 500
        assert transaction.lat_long == "-34.6,-58.3"

    def test_payment_defaults_to_zero(self, client, customer, seller, db_session):
        resp = client.post("/registerTransaction", json={"client_id": customer.id, "user_id": seller.id, "total": 800})
        transaction = db_session.get(Transaction, resp.get_json()["transaction_id"])
        assert (transaction.cash_paid, transaction.card_paid, transaction.bot_paid, transaction.debt) == (0, 0, 0, 0)

    def test_total_required(self, client, customer, seller):
        resp = client.post("/registerTransaction", json={"client_id": customer.id, "user_id": seller.id})
        assert resp.status_code == 400

    def test_dangling_client_is_storage_error(self, client, seller):
        resp = client.post("/registerTransaction", json={"client_id": 999, "user_id": seller.id, "total": 100})
        assert resp.status_code == 500
        assert resp.get_json()["kind"] == "storage"


class TestRegisterInventory:

    def test_numeric_strings_are_coerced(self, client, customer, seller, make_product, make_transaction, db_session):
        product = make_product("Bidon agua 20L")
        transaction = make_transaction(customer, seller, total=3000)

        resp = client.post("/registerInventory", json={
            "transaction_id": str(transaction.id),
            "product_id": str(product.id),
            "quantity": "2",
            "unit_cost": "1500",
        })
        assert resp.status_code == 200
        line = db_session.get(InventoryLine, (transaction.id, product.id))
        assert line.quantity == 2
        assert line.unit_cost == 1500

    def test_non_numeric_is_400(self, client, customer, seller, make_product, make_transaction):
        product = make_product("Bidon agua 20L")
        transaction = make_transaction(customer, seller, total=3000)
        resp = client.post("/registerInventory", json={
            "transaction_id": transaction.id,
            "product_id": product.id,
            "quantity": "dos",
            "unit_cost": 1500,
        })
        assert resp.status_code == 400

    def test_missing_field_is_400(self, client):
        resp = client.post("/registerInventory", json={"transaction_id": 1, "product_id": 1, "quantity": 1})
        assert resp.status_code == 400

    def test_same_product_twice_is_409(self, client, customer, seller, make_product, make_transaction):
        product = make_product("Bidon agua 20L")
        transaction = make_transaction(customer, seller, total=3000, lines=[(product, 1)])
        resp = client.post("/registerInventory", json={
            "transaction_id": transaction.id, "product_id": product.id, "quantity": 1, "unit_cost": 1500,
        })
        assert resp.status_code == 409


class TestListings:

    def test_transactions_default_to_today(self, client, customer, seller, make_transaction):
        make_transaction(customer, seller, total=1000)
        make_transaction(customer, seller, total=2000, created_at=utcnow() - timedelta(days=3))

        rows = client.get("/transactions").get_json()
        assert [row["total"] for row in rows] == [1000]

    def test_explicit_window_and_user_filter(self, client, customer, seller, make_user, make_transaction):
        other = make_user("otro")
        three_days_ago = utcnow() - timedelta(days=3)
        make_transaction(customer, seller, total=1000, created_at=three_days_ago)
        make_transaction(customer, other, total=2000, created_at=three_days_ago)
        make_transaction(customer, seller, total=4000)

        day = three_days_ago.date().isoformat()
        rows = client.get("/transactions", query_string={"startDate": day, "endDate": day}).get_json()
        assert sorted(row["total"] for row in rows) == [1000, 2000]

        rows = client.get("/transactions", query_string={
            "startDate": day, "endDate": utcnow().date().isoformat(), "UserID": seller.id,
        }).get_json()
        assert sorted(row["total"] for row in rows) == [1000, 4000]

    def test_bad_dates_are_400(self, client):
        assert client.get("/transactions", query_string={"startDate": "ayer"}).status_code == 400
        assert client.get("/expenses", query_string={"startDate": "2026-05-02", "endDate": "2026-05-01"}).status_code == 400
        assert client.get("/inventory", query_string={"UserID": "uno"}).status_code == 400

    def test_inventory_and_summary(self, client, customer, seller, make_product, make_transaction):
        water = make_product("Bidon agua 20L", price=1500)
        soda = make_product("Sifon soda x6", price=2200)
        make_transaction(customer, seller, total=5200, lines=[(water, 2), (soda, 1)])
        make_transaction(customer, seller, total=1500, lines=[(water, 1)])

        lines = client.get("/inventory").get_json()
        assert len(lines) == 3
        assert {line["product_description"] for line in lines} == {"Bidon agua 20L", "Sifon soda x6"}

        summary = {row["description"]: row for row in client.get("/inventory-summary").get_json()}
        assert summary["Bidon agua 20L"]["quantity"] == 3
        assert summary["Bidon agua 20L"]["total_value"] == 4500
        assert summary["Sifon soda x6"]["quantity"] == 1


class TestExpenses:

    def test_add_and_list(self, client, seller):
        resp = client.post("/add-egreso", json={
            "user_id": seller.id, "category": "combustible", "description": "Nafta", "amount": "800",
        })
        assert resp.status_code == 200
        assert resp.get_json()["expense_id"]

        rows = client.get("/expenses").get_json()
        assert len(rows) == 1
        assert rows[0]["amount"] == 800
        assert rows[0]["user_name"] == "Carlos Ruiz"

    def test_amount_required(self, client, seller):
        resp = client.post("/add-egreso", json={"user_id": seller.id, "category": "otros"})
        assert resp.status_code == 400

    def test_unknown_user_is_404(self, client):
        resp = client.post("/add-egreso", json={"user_id": 999, "category": "otros", "amount": 10})
        assert resp.status_code == 404

    def test_user_filter(self, client, seller, admin, make_expense):
        make_expense(seller, 500)
        make_expense(admin, 300)
        rows = client.get("/expenses", query_string={"UserID": admin.id}).get_json()
        assert [row["amount"] for row in rows] == [300]
