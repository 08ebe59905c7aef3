from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from boutique.core.store import RecordStore
from boutique.logger_config import logger
from boutique.models.expense import Expense, ExpenseCategory
from boutique.schemas.expense import ExpenseResponse
from boutique.utils.dates import today


def create_expense(
    store: RecordStore,
    description: str,
    amount: Decimal,
    category: ExpenseCategory = ExpenseCategory.Other,
    expense_date: Optional[date] = None,
) -> ExpenseResponse:
    """Create a single expense; date defaults to today."""
    if amount <= 0:
        raise ValueError("Expense amount must be greater than 0")

    with store.transaction("expenses") as db:
        expense = Expense(
            description=description.strip(),
            amount=amount,
            category=category,
            date=expense_date or today(),
        )
        db.add(expense)
        db.flush()
        created = ExpenseResponse.model_validate(expense)

    logger.info(f"Expense {created.id} recorded: {created.category.value} {created.amount}")
    return created


def delete_expense(store: RecordStore, expense_id: str) -> bool:
    """Delete an expense."""
    with store.transaction("expenses") as db:
        expense = db.get(Expense, expense_id)
        if not expense:
            return False
        db.delete(expense)

    logger.info(f"Expense {expense_id} deleted")
    return True


def get_all_expenses(
    store: RecordStore,
    category: Optional[ExpenseCategory] = None,
) -> Tuple[List[ExpenseResponse], int, Decimal]:
    """List expenses newest first. Returns (rows, total_count, total_amount)."""
    with store.session() as db:
        query = db.query(Expense)
        if category:
            query = query.filter(Expense.category == category)
        rows = query.order_by(Expense.created_at.desc(), Expense.id.desc()).all()
        expenses = [ExpenseResponse.model_validate(e) for e in rows]

    total_amount = sum((e.amount for e in expenses), Decimal("0"))
    return expenses, len(expenses), total_amount
