from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional, Tuple
from datetime import datetime

from boutique.schemas.expense import ExpenseResponse
from boutique.schemas.finance import (
    CapitalInjectionResponse,
    StockPurchaseResponse,
    WithdrawalResponse,
)
from boutique.schemas.order import OrderResponse
from boutique.schemas.product import ProductResponse


class LedgerSnapshot(BaseModel):
    """Point-in-time contents of all six collections."""
    products: Tuple[ProductResponse, ...] = ()
    orders: Tuple[OrderResponse, ...] = ()
    expenses: Tuple[ExpenseResponse, ...] = ()
    stock_purchases: Tuple[StockPurchaseResponse, ...] = ()
    withdrawals: Tuple[WithdrawalResponse, ...] = ()
    injections: Tuple[CapitalInjectionResponse, ...] = ()

    class Config:
        frozen = True


class LedgerSummary(BaseModel):
    total_revenue: Decimal = Decimal("0")
    total_stock_units: int = 0
    total_expenses: Decimal = Decimal("0")
    cost_of_goods_sold: Decimal = Decimal("0")
    gross_profit: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    total_stock_spend: Decimal = Decimal("0")
    total_withdrawn: Decimal = Decimal("0")
    total_injected: Decimal = Decimal("0")
    personal_balance: Decimal = Decimal("0")
    capital_to_replenish: Decimal = Decimal("0")
    current_capital_balance: Decimal = Decimal("0")
    inventory_asset_value: Decimal = Decimal("0")
    inventory_retail_value: Decimal = Decimal("0")
    total_business_value: Decimal = Decimal("0")
    gross_margin_pct: Decimal = Decimal("0")
    expense_ratio_pct: Decimal = Decimal("0")
    low_stock_count: int = 0
    critical_stock_count: int = 0
    currency: str = "UGX"
    stale: bool = False
    computed_at: Optional[datetime] = Field(default=None)


class DashboardResponse(BaseModel):
    summary: LedgerSummary
    recent_orders: List[OrderResponse]
    low_stock: List[ProductResponse]
