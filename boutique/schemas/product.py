from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from boutique.models.product import ProductCategory


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: ProductCategory = ProductCategory.Bags
    quantity: int = Field(0, ge=0)
    cost_price: Decimal = Field(Decimal("0"), ge=0)
    sell_price: Decimal = Field(Decimal("0"), ge=0)


class ProductCreate(ProductBase):
    id: Optional[str] = Field(None, max_length=40)


class ProductUpdate(ProductBase):
    pass


class ProductResponse(ProductBase):
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class ProductListResponse(BaseModel):
    total: int
    products: list[ProductResponse]


class ProductDeleteResponse(BaseModel):
    message: str
