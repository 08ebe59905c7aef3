from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from boutique.models.order import OrderStatus

# Alias to avoid field name 'date' shadowing type 'date' in annotations (Pydantic v2)
DateType = date


class SaleCreate(BaseModel):
    """Sell `quantity` units of the product called `product_name`."""
    product_name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(1, gt=0)


class OrderResponse(BaseModel):
    id: str
    product_name: str
    quantity: int
    total_amount: Decimal
    date: DateType
    status: OrderStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class OrderListResponse(BaseModel):
    total: int
    total_amount: Decimal
    orders: List[OrderResponse]
