# Overview: Service-layer operations for reporting; encapsulates business logic and database work.

"""
Financial reports over a date window.

Definitions used throughout:
- caja (cash on hand) = cash payments received - expenses paid
- income              = cash + card payments - expenses paid

Bot/third-party payments are reported on their own (total_bot) and are not
part of caja or income: that money is not collected by the business.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime

from sqlalchemy import func

from ..extensions import db
from ..models import Expense, InventoryLine, Transaction, User
from ..time_utils import RANGE_KEYWORDS, day_window, keyword_window, parse_date, to_utc_z
from ..validation import ValidationError
from . import client_service, expense_service, sales_service

UNKNOWN_CLIENT = "Unknown Client"


def resolve_window(
    *,
    range_keyword: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    today: date | None = None,
) -> tuple[datetime, datetime]:
    """
    Turn request parameters into a half-open [start, end) window.

    An explicit range keyword wins. Otherwise startDate/endDate are inclusive
    calendar days; a missing bound defaults to the other one, and with
    neither the window is today.
    """
    if range_keyword:
        try:
            return keyword_window(range_keyword, today=today)
        except ValueError:
            raise ValidationError(f"Invalid range. Use one of: {', '.join(RANGE_KEYWORDS)}")

    try:
        start_day = parse_date(start_date)
        end_day = parse_date(end_date)
    except ValueError:
        raise ValidationError("startDate and endDate must be YYYY-MM-DD")

    if start_day is None and end_day is None:
        return keyword_window("today", today=today)
    start_day = start_day or end_day
    end_day = end_day or start_day
    if end_day < start_day:
        raise ValidationError("endDate cannot be before startDate")
    return day_window(start_day, end_day)


def _user_bucket() -> dict:
    return {
        "transaction_count": 0,
        "total_sales": 0,
        "cash": 0,
        "card": 0,
        "bot": 0,
        "expenses": 0,
        "units_sold": 0,
    }


def financial_report(start: datetime, end: datetime) -> dict:
    in_window = (Transaction.created_at >= start, Transaction.created_at < end)
    expense_window = (Expense.created_at >= start, Expense.created_at < end)

    tx_rows = (
        db.session.query(
            Transaction.user_id.label("user_id"),
            func.count(Transaction.id).label("transaction_count"),
            func.coalesce(func.sum(Transaction.total), 0).label("total_sales"),
            func.coalesce(func.sum(Transaction.cash_paid), 0).label("cash"),
            func.coalesce(func.sum(Transaction.card_paid), 0).label("card"),
            func.coalesce(func.sum(Transaction.bot_paid), 0).label("bot"),
        )
        .filter(*in_window)
        .group_by(Transaction.user_id)
        .all()
    )

    unit_rows = (
        db.session.query(
            Transaction.user_id.label("user_id"),
            func.coalesce(func.sum(InventoryLine.quantity), 0).label("units"),
        )
        .join(Transaction, InventoryLine.transaction_id == Transaction.id)
        .filter(*in_window)
        .group_by(Transaction.user_id)
        .all()
    )

    expense_rows = (
        db.session.query(
            Expense.user_id.label("user_id"),
            func.coalesce(func.sum(Expense.amount), 0).label("amount"),
        )
        .filter(*expense_window)
        .group_by(Expense.user_id)
        .all()
    )

    category_rows = (
        db.session.query(
            Expense.category.label("category"),
            func.count(Expense.id).label("count"),
            func.coalesce(func.sum(Expense.amount), 0).label("total"),
        )
        .filter(*expense_window)
        .group_by(Expense.category)
        .order_by(Expense.category.asc())
        .all()
    )

    per_user: dict[int, dict] = defaultdict(_user_bucket)
    for row in tx_rows:
        bucket = per_user[row.user_id]
        bucket["transaction_count"] = int(row.transaction_count or 0)
        bucket["total_sales"] = int(row.total_sales or 0)
        bucket["cash"] = int(row.cash or 0)
        bucket["card"] = int(row.card or 0)
        bucket["bot"] = int(row.bot or 0)
    for row in unit_rows:
        per_user[row.user_id]["units_sold"] = int(row.units or 0)
    for row in expense_rows:
        per_user[row.user_id]["expenses"] = int(row.amount or 0)

    names = {}
    if per_user:
        names = dict(
            db.session.query(User.id, User.name).filter(User.id.in_(list(per_user.keys()))).all()
        )

    by_user = []
    for user_id, bucket in per_user.items():
        by_user.append({
            "user_id": user_id,
            "name": names.get(user_id),
            **bucket,
            "caja": bucket["cash"] - bucket["expenses"],
            "income": bucket["cash"] + bucket["card"] - bucket["expenses"],
        })
    by_user.sort(key=lambda entry: ((entry["name"] or "").lower(), entry["user_id"]))

    def _total(key: str) -> int:
        return sum(entry[key] for entry in by_user)

    total_cash = _total("cash")
    total_card = _total("card")
    total_expenses = _total("expenses")

    return {
        "start": to_utc_z(start),
        "end": to_utc_z(end),
        "transaction_count": _total("transaction_count"),
        "total_sales": _total("total_sales"),
        "total_cash": total_cash,
        "total_card": total_card,
        "total_bot": _total("bot"),
        "total_expenses": total_expenses,
        "total_caja": total_cash - total_expenses,
        "total_income": total_cash + total_card - total_expenses,
        "units_sold": _total("units_sold"),
        "by_user": by_user,
        "expenses_by_category": [
            {
                "category": row.category,
                "count": int(row.count or 0),
                "total": int(row.total or 0),
            }
            for row in category_rows
        ],
        "expenses": expense_service.list_expenses(start, end),
    }


def consolidated_report(start: datetime, end: datetime, user_id: int | None = None) -> dict:
    """
    One view of transactions (with their lines and client names) and
    expenses, built from the same functions that back the listing endpoints.
    """
    transactions = sales_service.list_transactions(start, end, user_id)
    expenses = expense_service.list_expenses(start, end, user_id)
    lines = sales_service.list_inventory(start, end, user_id)
    clients = client_service.list_clients()

    lines_by_transaction: dict[int, list[dict]] = defaultdict(list)
    for line in lines:
        lines_by_transaction[line["transaction_id"]].append(line)
    client_names = {client["id"]: client["description"] for client in clients}

    for transaction in transactions:
        transaction["items"] = lines_by_transaction.get(transaction["id"], [])
        transaction["client_name"] = client_names.get(transaction["client_id"], UNKNOWN_CLIENT)

    total_expenses = sum(expense["amount"] for expense in expenses)
    total_cash = sum(transaction["cash_paid"] for transaction in transactions)
    total_sales = sum(transaction["total"] for transaction in transactions)

    return {
        "start": to_utc_z(start),
        "end": to_utc_z(end),
        "user_id": user_id,
        "transactions": transactions,
        "expenses": expenses,
        "total_caja": total_cash - total_expenses,
        "total_win": total_sales - total_expenses,
    }
