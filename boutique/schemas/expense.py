from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from boutique.models.expense import ExpenseCategory

# Alias to avoid field name 'date' shadowing type 'date' in annotations (Pydantic v2)
DateType = date


class ExpenseCreate(BaseModel):
    """Single expense create - date defaults to today on server if not provided."""
    date: Optional[DateType] = None  # default to today in service
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0)
    category: ExpenseCategory = ExpenseCategory.Rent


class ExpenseResponse(BaseModel):
    id: str
    description: str
    amount: Decimal
    category: ExpenseCategory
    date: DateType
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class ExpenseListResponse(BaseModel):
    total: int
    total_amount: Decimal
    expenses: List[ExpenseResponse]


class ExpenseDeleteResponse(BaseModel):
    message: str
