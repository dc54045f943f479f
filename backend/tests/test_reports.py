"""
Financial and consolidated report tests.

caja = cash received - expenses; income = cash + card - expenses.
Bot payments are reported on their own and stay out of both.
"""

from datetime import date, timedelta

import pytest

from reparto.services import client_service, reporting_service
from reparto.time_utils import utcnow
from reparto.validation import ValidationError


class TestFinancialReport:

    def test_today_caja(self, client, customer, seller, make_transaction, make_expense):
        make_transaction(customer, seller, total=1000, cash=1000)
        make_transaction(customer, seller, total=2000, cash=2000)
        make_expense(seller, 500)

        resp = client.get("/report", query_string={"range": "today"})
        assert resp.status_code == 200
        report = resp.get_json()
        assert report["range"] == "today"
        assert report["transaction_count"] == 2
        assert report["total_sales"] == 3000
        assert report["total_cash"] == 3000
        assert report["total_expenses"] == 500
        assert report["total_caja"] == 2500
        assert report["total_income"] == 2500

    def test_card_counts_for_income_not_caja(self, client, customer, seller, make_transaction, make_expense):
        make_transaction(customer, seller, total=3000, cash=1000, card=1500, bot=300, debt=200)
        make_expense(seller, 400)

        report = client.get("/report", query_string={"range": "today"}).get_json()
        assert report["total_card"] == 1500
        assert report["total_bot"] == 300
        assert report["total_caja"] == 600
        assert report["total_income"] == 2100

    def test_invalid_range_is_400(self, client):
        resp = client.get("/report", query_string={"range": "fortnight"})
        assert resp.status_code == 400
        assert resp.get_json()["kind"] == "validation"

    def test_empty_window_is_all_zeros(self, client):
        report = client.get("/report", query_string={"range": "month"}).get_json()
        for key in ("transaction_count", "total_sales", "total_cash", "total_card", "total_bot",
                    "total_expenses", "total_caja", "total_income", "units_sold"):
            assert report[key] == 0
        assert report["by_user"] == []
        assert report["expenses_by_category"] == []
        assert report["expenses"] == []

    def test_per_user_breakdown(self, client, customer, seller, make_user, make_product, make_transaction, make_expense):
        other = make_user("lucia", name="Lucia Gomez")
        water = make_product("Bidon agua 20L", price=1500)
        make_transaction(customer, seller, total=3000, cash=3000, lines=[(water, 2)])
        make_transaction(customer, other, total=1500, card=1500, lines=[(water, 1)])
        make_expense(seller, 800, category="combustible")
        make_expense(other, 300, category="otros")
        make_expense(other, 200, category="combustible")

        report = client.get("/report", query_string={"range": "today"}).get_json()
        assert report["units_sold"] == 3

        by_user = {entry["name"]: entry for entry in report["by_user"]}
        assert by_user["Carlos Ruiz"]["caja"] == 2200
        assert by_user["Carlos Ruiz"]["units_sold"] == 2
        assert by_user["Lucia Gomez"]["caja"] == -500
        assert by_user["Lucia Gomez"]["income"] == 1000

        categories = {row["category"]: row for row in report["expenses_by_category"]}
        assert categories["combustible"] == {"category": "combustible", "count": 2, "total": 1000}
        assert categories["otros"]["total"] == 300
        assert len(report["expenses"]) == 3

    def test_week_is_trailing_seven_days(self, client, customer, seller, make_transaction):
        now = utcnow()
        make_transaction(customer, seller, total=100, cash=100, created_at=now - timedelta(days=6))
        make_transaction(customer, seller, total=200, cash=200, created_at=now - timedelta(days=7))

        report = client.get("/report", query_string={"range": "week"}).get_json()
        assert report["total_sales"] == 100

    def test_explicit_dates(self, client, customer, seller, make_transaction):
        three_days_ago = utcnow() - timedelta(days=3)
        make_transaction(customer, seller, total=700, cash=700, created_at=three_days_ago)
        make_transaction(customer, seller, total=900, cash=900)

        day = three_days_ago.date().isoformat()
        report = client.get("/report", query_string={"startDate": day, "endDate": day}).get_json()
        assert report["range"] == "custom"
        assert report["total_sales"] == 700

    def test_bad_date_is_400(self, client):
        resp = client.get("/report", query_string={"startDate": "15/05/2026"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("query", [{}, {"range": ""}, {"startDate": "", "endDate": ""}])
    def test_default_window_is_labelled_today(self, client, customer, seller, make_transaction, query):
        make_transaction(customer, seller, total=1000, cash=1000)
        report = client.get("/report", query_string=query).get_json()
        assert report["range"] == "today"
        assert report["total_sales"] == 1000


class TestResolveWindow:

    def test_single_bound_copies_other(self):
        start, end = reporting_service.resolve_window(start_date="2026-05-10", today=date(2026, 5, 20))
        assert start.date() == date(2026, 5, 10)
        assert end.date() == date(2026, 5, 11)

    def test_defaults_to_today(self):
        start, end = reporting_service.resolve_window(today=date(2026, 5, 20))
        assert (start.date(), end.date()) == (date(2026, 5, 20), date(2026, 5, 21))

    def test_keyword_wins_over_dates(self):
        start, _ = reporting_service.resolve_window(
            range_keyword="month", start_date="2026-01-01", today=date(2026, 5, 20),
        )
        assert start.date() == date(2026, 5, 1)

    def test_reversed_dates_rejected(self):
        with pytest.raises(ValidationError):
            reporting_service.resolve_window(start_date="2026-05-10", end_date="2026-05-09")


class TestConsolidatedReport:

    def test_items_and_client_names(self, client, customer, seller, make_product, make_transaction, make_expense):
        water = make_product("Bidon agua 20L", price=1500)
        soda = make_product("Sifon soda x6", price=2200)
        make_transaction(customer, seller, total=3700, cash=2000, card=1700, lines=[(water, 1), (soda, 1)])
        make_expense(seller, 500)

        resp = client.get("/consolidated-report")
        assert resp.status_code == 200
        report = resp.get_json()
        assert len(report["transactions"]) == 1
        transaction = report["transactions"][0]
        assert transaction["client_name"] == "Almacen Don Pepe"
        assert {item["product_description"] for item in transaction["items"]} == {"Bidon agua 20L", "Sifon soda x6"}
        assert report["total_caja"] == 1500
        assert report["total_win"] == 3200

    def test_user_filter(self, client, customer, seller, make_user, make_transaction):
        other = make_user("lucia", name="Lucia Gomez")
        make_transaction(customer, seller, total=1000, cash=1000)
        make_transaction(customer, other, total=2000, cash=2000)

        report = client.get("/consolidated-report", query_string={"UserID": other.id}).get_json()
        assert report["user_id"] == other.id
        assert [t["total"] for t in report["transactions"]] == [2000]

    def test_missing_client_falls_back_to_placeholder(self, client, customer, seller, make_transaction, monkeypatch):
        make_transaction(customer, seller, total=1000, cash=1000)
        monkeypatch.setattr(client_service, "list_clients", lambda: [])

        report = client.get("/consolidated-report").get_json()
        assert report["transactions"][0]["client_name"] == reporting_service.UNKNOWN_CLIENT

    def test_transaction_without_lines_has_empty_items(self, client, customer, seller, make_transaction):
        make_transaction(customer, seller, total=1000, debt=1000)
        report = client.get("/consolidated-report").get_json()
        assert report["transactions"][0]["items"] == []
        assert report["total_caja"] == 0
