from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union
from datetime import date, datetime

# Alias to avoid field name 'date' shadowing type 'date' in annotations (Pydantic v2)
DateType = date


# ==================== REQUESTS ====================

class StockPurchaseCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = Field(None, max_length=255)
    date: Optional[DateType] = None


class WithdrawalCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    note: Optional[str] = Field(None, max_length=255)
    date: Optional[DateType] = None


class CapitalInjectionCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    source: Optional[str] = Field(None, max_length=255)
    date: Optional[DateType] = None


# ==================== RECORDS ====================

class StockPurchaseResponse(BaseModel):
    id: str
    description: str
    amount: Decimal
    date: DateType
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class WithdrawalResponse(BaseModel):
    id: str
    amount: Decimal
    date: DateType
    note: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class CapitalInjectionResponse(BaseModel):
    id: str
    amount: Decimal
    date: DateType
    source: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


# ==================== ACTIVITY FEED ====================
# Each entry carries an explicit `kind`; consumers switch on it rather than
# guessing the record type from which fields are present.

class StockPurchaseActivity(StockPurchaseResponse):
    kind: Literal["stock_purchase"] = "stock_purchase"

    @property
    def label(self) -> str:
        return self.description

    @property
    def is_inflow(self) -> bool:
        return False


class WithdrawalActivity(WithdrawalResponse):
    kind: Literal["withdrawal"] = "withdrawal"

    @property
    def label(self) -> str:
        return self.note

    @property
    def is_inflow(self) -> bool:
        return False


class CapitalInjectionActivity(CapitalInjectionResponse):
    kind: Literal["injection"] = "injection"

    @property
    def label(self) -> str:
        return self.source

    @property
    def is_inflow(self) -> bool:
        return True


ActivityEntry = Annotated[
    Union[StockPurchaseActivity, WithdrawalActivity, CapitalInjectionActivity],
    Field(discriminator="kind"),
]


class ActivityFeedResponse(BaseModel):
    total: int
    entries: List[ActivityEntry]
