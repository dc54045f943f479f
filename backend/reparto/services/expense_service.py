# Overview: Service-layer operations for cash expenses ("egresos").

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import Expense, User
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    enforce_amounts,
    validate_payload,
)

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={"user_id", "category", "description", "amount"},
    required_on_create={"user_id", "category", "amount"},
)


def add_expense(payload: dict) -> Expense:
    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)
    enforce_amounts(patch, ("amount",))
    if db.session.get(User, patch["user_id"]) is None:
        raise NotFoundError("User not found")

    expense = Expense(**patch)
    db.session.add(expense)
    db.session.commit()
    return expense


def list_expenses(start: datetime, end: datetime, user_id: int | None = None) -> list[dict]:
    """Expenses in the window, each with the spending user's display name."""
    query = (
        db.session.query(Expense, User.name)
        .join(User, Expense.user_id == User.id)
        .filter(Expense.created_at >= start, Expense.created_at < end)
    )
    if user_id is not None:
        query = query.filter(Expense.user_id == user_id)

    rows = query.order_by(Expense.created_at.asc(), Expense.id.asc()).all()
    items = []
    for expense, user_name in rows:
        item = expense.to_dict()
        item["user_name"] = user_name
        items.append(item)
    return items
