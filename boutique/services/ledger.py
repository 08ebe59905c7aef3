"""
Financial figures derived from the current contents of the record store.

Every function here is pure: it reads records and returns numbers. Sign
conventions (what is inflow, what is outflow) are decided here, never stored
on the records themselves.
"""
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence
import threading

from boutique.core.config import settings
from boutique.core.exceptions import StoreUnavailable
from boutique.logger_config import logger
from boutique.models.product import normalize_name
from boutique.schemas.ledger import LedgerSnapshot, LedgerSummary

# Share of the selling price assumed to be cost when an order's product can
# no longer be found (renamed or deleted).
FALLBACK_COST_RATIO = Decimal("0.6")

ZERO = Decimal("0")
HUNDRED = Decimal("100")
PERCENT_PLACES = Decimal("0.1")
RECENT_ORDERS_LIMIT = 5


def _total(values: Iterable) -> Decimal:
    return sum((Decimal(v) for v in values), ZERO)


# ==================== PRODUCT MATCHING ====================

def product_index(products: Sequence) -> Dict[str, object]:
    """Normalised name -> product; the first product with a given name wins."""
    index = {}
    for product in products:
        index.setdefault(normalize_name(product.name), product)
    return index


def find_product(products: Sequence, name: str):
    return product_index(products).get(normalize_name(name))


# ==================== SIMPLE TOTALS ====================

def total_revenue(orders: Sequence) -> Decimal:
    return _total(o.total_amount for o in orders)


def total_stock_units(products: Sequence) -> int:
    return sum(p.quantity for p in products)


def total_expenses(expenses: Sequence) -> Decimal:
    return _total(e.amount for e in expenses)


def total_stock_spend(stock_purchases: Sequence) -> Decimal:
    return _total(s.amount for s in stock_purchases)


def total_withdrawn(withdrawals: Sequence) -> Decimal:
    return _total(w.amount for w in withdrawals)


def total_injected(injections: Sequence) -> Decimal:
    return _total(i.amount for i in injections)


# ==================== PROFIT ====================

def unit_cost(order, products: Sequence, index: Optional[Dict] = None) -> Decimal:
    """
    Cost of one unit sold in `order`: the matching product's cost price, or
    the fallback ratio of the order's own unit price.
    """
    index = index if index is not None else product_index(products)
    product = index.get(normalize_name(order.product_name))
    if product is not None:
        return Decimal(product.cost_price)
    return FALLBACK_COST_RATIO * (Decimal(order.total_amount) / order.quantity)


def order_cost(order, products: Sequence, index: Optional[Dict] = None) -> Decimal:
    index = index if index is not None else product_index(products)
    product = index.get(normalize_name(order.product_name))
    if product is not None:
        return Decimal(product.cost_price) * order.quantity
    # Same as unit_cost * quantity, without the division round trip
    return FALLBACK_COST_RATIO * Decimal(order.total_amount)


def cost_of_goods_sold(orders: Sequence, products: Sequence) -> Decimal:
    index = product_index(products)
    return _total(order_cost(o, products, index) for o in orders)


def gross_profit(orders: Sequence, products: Sequence) -> Decimal:
    return total_revenue(orders) - cost_of_goods_sold(orders, products)


def net_profit(snapshot: LedgerSnapshot) -> Decimal:
    return gross_profit(snapshot.orders, snapshot.products) - total_expenses(snapshot.expenses)


def personal_balance(snapshot: LedgerSnapshot) -> Decimal:
    """Owner's drawable salary: net profit not yet withdrawn."""
    return net_profit(snapshot) - total_withdrawn(snapshot.withdrawals)


# ==================== CAPITAL & VALUATION ====================

def capital_to_replenish(snapshot: LedgerSnapshot) -> Decimal:
    revenue = total_revenue(snapshot.orders)
    gross = gross_profit(snapshot.orders, snapshot.products)
    return (revenue - gross) + total_injected(snapshot.injections)


def current_capital_balance(snapshot: LedgerSnapshot) -> Decimal:
    return capital_to_replenish(snapshot) - total_stock_spend(snapshot.stock_purchases)


def inventory_asset_value(products: Sequence) -> Decimal:
    return _total(Decimal(p.cost_price) * p.quantity for p in products)


def inventory_retail_value(products: Sequence) -> Decimal:
    return _total(Decimal(p.sell_price) * p.quantity for p in products)


def total_business_value(snapshot: LedgerSnapshot) -> Decimal:
    return (
        current_capital_balance(snapshot)
        + inventory_asset_value(snapshot.products)
        + personal_balance(snapshot)
    )


def percentage_of_revenue(value: Decimal, revenue: Decimal) -> Decimal:
    if revenue == 0:
        return ZERO
    return (HUNDRED * value / revenue).quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)


# ==================== STOCK ALERTS ====================

def low_stock_products(products: Sequence, threshold: Optional[int] = None) -> List:
    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    return [p for p in products if p.quantity < threshold]


def critical_stock_count(products: Sequence, threshold: Optional[int] = None) -> int:
    threshold = settings.CRITICAL_STOCK_THRESHOLD if threshold is None else threshold
    return sum(1 for p in products if p.quantity < threshold)


def recent_orders(orders: Sequence, limit: int = RECENT_ORDERS_LIMIT) -> List:
    """Latest orders first; `orders` is expected oldest first."""
    if limit <= 0:
        return []
    return list(orders[-limit:])[::-1]


# ==================== SUMMARY ====================

def summarize(
    snapshot: LedgerSnapshot,
    low_stock_threshold: Optional[int] = None,
    critical_stock_threshold: Optional[int] = None,
    currency: Optional[str] = None,
) -> LedgerSummary:
    products, orders = snapshot.products, snapshot.orders

    revenue = total_revenue(orders)
    cogs = cost_of_goods_sold(orders, products)
    gross = revenue - cogs
    expenses = total_expenses(snapshot.expenses)
    net = gross - expenses
    withdrawn = total_withdrawn(snapshot.withdrawals)
    injected = total_injected(snapshot.injections)
    stock_spend = total_stock_spend(snapshot.stock_purchases)

    balance = net - withdrawn
    replenish = (revenue - gross) + injected
    capital = replenish - stock_spend
    asset_value = inventory_asset_value(products)

    return LedgerSummary(
        total_revenue=revenue,
        total_stock_units=total_stock_units(products),
        total_expenses=expenses,
        cost_of_goods_sold=cogs,
        gross_profit=gross,
        net_profit=net,
        total_stock_spend=stock_spend,
        total_withdrawn=withdrawn,
        total_injected=injected,
        personal_balance=balance,
        capital_to_replenish=replenish,
        current_capital_balance=capital,
        inventory_asset_value=asset_value,
        inventory_retail_value=inventory_retail_value(products),
        total_business_value=capital + asset_value + balance,
        gross_margin_pct=percentage_of_revenue(gross, revenue),
        expense_ratio_pct=percentage_of_revenue(expenses, revenue),
        low_stock_count=len(low_stock_products(products, low_stock_threshold)),
        critical_stock_count=critical_stock_count(products, critical_stock_threshold),
        currency=currency or settings.CURRENCY,
        computed_at=datetime.now(timezone.utc),
    )


class LedgerMonitor:
    """
    Keeps the latest LedgerSummary, recomputed whenever any collection
    changes. When the store cannot be read it keeps serving the last good
    summary (or an empty one) marked stale.

    Reads and cache updates happen under one lock, so the cached summary
    always comes from the most recent read even when notifications from
    concurrent writers arrive out of order.
    """

    def __init__(
        self,
        store,
        low_stock_threshold: Optional[int] = None,
        critical_stock_threshold: Optional[int] = None,
        currency: Optional[str] = None,
    ):
        self.store = store
        self.low_stock_threshold = low_stock_threshold
        self.critical_stock_threshold = critical_stock_threshold
        self.currency = currency
        self._summary: Optional[LedgerSummary] = None
        self._lock = threading.Lock()

    def start(self) -> "LedgerMonitor":
        self.store.subscribe_all(self._on_change)
        self.refresh()
        return self

    def stop(self) -> None:
        self.store.unsubscribe_all(self._on_change)

    def compute(self, snapshot: LedgerSnapshot) -> LedgerSummary:
        """Summary of `snapshot` with this monitor's thresholds and currency."""
        return summarize(
            snapshot,
            low_stock_threshold=self.low_stock_threshold,
            critical_stock_threshold=self.critical_stock_threshold,
            currency=self.currency,
        )

    def _on_change(self, snapshot: LedgerSnapshot) -> None:
        # The delivered snapshot may already be older than one handled by
        # another writer's notification; read the store again instead.
        self.refresh()

    def refresh(self) -> LedgerSummary:
        """Recompute from the store. Stale cached figures if it is unreachable."""
        with self._lock:
            try:
                snapshot = self.store.snapshot()
            except StoreUnavailable:
                logger.warning("Ledger refresh failed, serving stale summary")
                return self._stale()
            summary = self.compute(snapshot)
            self._summary = summary

        logger.debug(
            f"Ledger recomputed: revenue={summary.total_revenue}, "
            f"net_profit={summary.net_profit}, business_value={summary.total_business_value}"
        )
        return summary

    def _stale(self) -> LedgerSummary:
        last = self._summary
        if last is None:
            last = LedgerSummary(currency=self.currency or settings.CURRENCY)
        return last.model_copy(update={"stale": True})

    @property
    def summary(self) -> LedgerSummary:
        """Last computed summary, without reading the store unless there is none."""
        with self._lock:
            current = self._summary
        if current is None:
            return self.refresh()
        return current
