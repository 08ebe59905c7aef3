from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional

from boutique.core.dependencies import get_store
from boutique.core.store import RecordStore
from boutique.models.expense import ExpenseCategory
from boutique.schemas.expense import (
    ExpenseCreate,
    ExpenseDeleteResponse,
    ExpenseListResponse,
    ExpenseResponse,
)
from boutique.services.expense_service import create_expense, delete_expense, get_all_expenses

router = APIRouter()


@router.get("", response_model=ExpenseListResponse)
def list_expenses(
    category: Optional[ExpenseCategory] = Query(None, description="Filter by category"),
    store: RecordStore = Depends(get_store),
):
    """List expenses, newest first, with their total."""
    expenses, total, total_amount = get_all_expenses(store, category=category)
    return ExpenseListResponse(total=total, total_amount=total_amount, expenses=expenses)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense_route(
    body: ExpenseCreate,
    store: RecordStore = Depends(get_store),
):
    """Create a single expense. Date defaults to today if not provided."""
    try:
        return create_expense(
            store,
            description=body.description,
            amount=body.amount,
            category=body.category,
            expense_date=body.date,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.delete("/{expense_id}", response_model=ExpenseDeleteResponse)
def delete_expense_route(
    expense_id: str,
    store: RecordStore = Depends(get_store),
):
    if not delete_expense(store, expense_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Expense not found"
        )
    return ExpenseDeleteResponse(message="Expense deleted successfully")
