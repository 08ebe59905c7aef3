from decimal import Decimal
from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date

from boutique.models.expense import ExpenseCategory
from boutique.models.order import OrderStatus
from boutique.models.product import ProductCategory
from boutique.utils.dates import parse_record_date
from boutique.utils.money import plain_number

# Alias to avoid field name 'date' shadowing type 'date' in annotations (Pydantic v2)
DateType = date


class BackupRecord(BaseModel):
    """Shared config: camelCase on the wire, snake_case in Python."""
    id: Optional[str] = Field(None, max_length=40)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        # Browser-era ids were Date.now() numbers
        if value is None:
            return None
        return str(value)


class DatedBackupRecord(BackupRecord):
    date: DateType

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return parse_record_date(value)


class BackupProduct(BackupRecord):
    name: str = Field(..., min_length=1, max_length=100)
    category: ProductCategory
    quantity: int = Field(..., ge=0)
    cost_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    sell_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)

    @field_serializer("cost_price", "sell_price", when_used="json")
    def serialize_money(self, value: Decimal):
        return plain_number(value)


class BackupOrder(DatedBackupRecord):
    product_name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., gt=0)
    total_amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    status: OrderStatus = OrderStatus.Paid

    @field_serializer("total_amount", when_used="json")
    def serialize_money(self, value: Decimal):
        return plain_number(value)


class BackupExpense(DatedBackupRecord):
    description: str = Field(..., max_length=255)
    amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    category: ExpenseCategory = ExpenseCategory.Other

    @field_serializer("amount", when_used="json")
    def serialize_money(self, value: Decimal):
        return plain_number(value)


class BackupStockPurchase(DatedBackupRecord):
    description: str = Field("Restock", max_length=255)
    amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)

    @field_serializer("amount", when_used="json")
    def serialize_money(self, value: Decimal):
        return plain_number(value)


class BackupWithdrawal(DatedBackupRecord):
    amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    note: str = Field("Personal Use", max_length=255)

    @field_serializer("amount", when_used="json")
    def serialize_money(self, value: Decimal):
        return plain_number(value)


class BackupInjection(DatedBackupRecord):
    amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    source: str = Field("Owner Contribution", max_length=255)

    @field_serializer("amount", when_used="json")
    def serialize_money(self, value: Decimal):
        return plain_number(value)


class BackupPayload(BaseModel):
    """
    Full backup file. A collection that is absent (or null) is left alone on
    import; a present one, even an empty list, replaces the stored collection.
    """
    products: Optional[List[BackupProduct]] = None
    orders: Optional[List[BackupOrder]] = None
    expenses: Optional[List[BackupExpense]] = None
    stock_purchases: Optional[List[BackupStockPurchase]] = None
    withdrawals: Optional[List[BackupWithdrawal]] = None
    injections: Optional[List[BackupInjection]] = None
    export_date: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ImportResult(BaseModel):
    message: str
    replaced: dict[str, int]
