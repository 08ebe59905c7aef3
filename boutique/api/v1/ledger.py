from fastapi import APIRouter, Depends

from boutique.core.dependencies import get_ledger_monitor, get_store
from boutique.core.exceptions import StoreUnavailable
from boutique.core.store import RecordStore
from boutique.logger_config import logger
from boutique.schemas.ledger import DashboardResponse, LedgerSummary
from boutique.services.ledger import (
    LedgerMonitor,
    low_stock_products,
    recent_orders,
)

router = APIRouter()


@router.get("/summary", response_model=LedgerSummary)
def get_summary(monitor: LedgerMonitor = Depends(get_ledger_monitor)):
    """
    Financial figures read from the store on every request, so writes made by
    other workers or scripts are included. `stale` is true when the store
    could not be read and the last known figures are returned instead.
    """
    return monitor.refresh()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    store: RecordStore = Depends(get_store),
    monitor: LedgerMonitor = Depends(get_ledger_monitor),
):
    """Summary plus the last five sales and the products running low."""
    try:
        snapshot = store.snapshot()
    except StoreUnavailable:
        logger.warning("Dashboard served without records: store unavailable")
        return DashboardResponse(summary=monitor.refresh(), recent_orders=[], low_stock=[])

    # Every part of the dashboard comes from the same read
    return DashboardResponse(
        summary=monitor.compute(snapshot),
        recent_orders=recent_orders(snapshot.orders),
        low_stock=low_stock_products(snapshot.products, monitor.low_stock_threshold),
    )
