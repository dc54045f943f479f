"""
User administration tests.
"""

from reparto.models import User
from reparto.services.auth_service import verify_password


class TestUserListings:

    def test_users_lists_only_active(self, client, seller, make_user):
        make_user("baja", name="Usuario Baja", status="Inactive")
        rows = client.get("/users").get_json()
        assert {"id": seller.id, "name": "Carlos Ruiz"} in rows
        assert "Usuario Baja" not in {row["name"] for row in rows}

    def test_user_management_lists_everyone_without_hashes(self, client, seller, make_user):
        make_user("baja", status="Inactive")
        rows = client.get("/user-management").get_json()
        assert {row["username"] for row in rows} == {"admin", "vendedor", "baja"}
        assert all("password_hash" not in row for row in rows)


class TestUserUpdates:

    def test_update_fields(self, client, seller):
        resp = client.put(f"/user-management/update/{seller.id}", json={"phone": "1155550009", "hierarchy": 1})
        assert resp.status_code == 200
        user = resp.get_json()["user"]
        assert user["phone"] == "1155550009"
        assert user["hierarchy"] == 1

    def test_update_to_taken_username_is_409(self, client, seller):
        resp = client.put(f"/user-management/update/{seller.id}", json={"username": "admin"})
        assert resp.status_code == 409

    def test_password_not_writable_through_update(self, client, seller):
        resp = client.put(f"/user-management/update/{seller.id}", json={"password_hash": "x"})
        assert resp.status_code == 400

    def test_update_unknown_is_404(self, client):
        resp = client.put("/user-management/update/999", json={"name": "Nadie"})
        assert resp.status_code == 404

    def test_status_change_blocks_login(self, client, seller, db_session):
        before = db_session.get(User, seller.id).status_changed_at
        resp = client.put(f"/user-management/status/{seller.id}", json={"status": "Inactive"})
        assert resp.status_code == 200
        assert resp.get_json()["user"]["status"] == "Inactive"
        assert db_session.get(User, seller.id).status_changed_at != before

        login = client.get("/login", query_string={"Username": "vendedor", "Password": "secreto1"})
        assert login.status_code == 401

    def test_status_value_validated(self, client, seller):
        resp = client.put(f"/user-management/status/{seller.id}", json={"status": "Suspendido"})
        assert resp.status_code == 400

    def test_password_change(self, client, seller, db_session):
        resp = client.put(f"/user-management/password/{seller.id}", json={"password": "nuevaclave"})
        assert resp.status_code == 200
        assert verify_password("nuevaclave", db_session.get(User, seller.id).password_hash)

        login = client.get("/login", query_string={"Username": "vendedor", "Password": "nuevaclave"})
        assert login.status_code == 200

    def test_short_password_rejected(self, client, seller):
        resp = client.put(f"/user-management/password/{seller.id}", json={"password": "123"})
        assert resp.status_code == 400
