from fastapi import APIRouter, Depends, HTTPException, status

from boutique.core.dependencies import get_store
from boutique.core.store import RecordStore
from boutique.schemas.finance import (
    ActivityFeedResponse,
    CapitalInjectionCreate,
    CapitalInjectionResponse,
    StockPurchaseCreate,
    StockPurchaseResponse,
    WithdrawalCreate,
    WithdrawalResponse,
)
from boutique.services.finance_service import (
    add_injection,
    add_stock_purchase,
    get_activity_feed,
    withdraw,
)

router = APIRouter()


@router.post("/stock-purchases", response_model=StockPurchaseResponse, status_code=status.HTTP_201_CREATED)
def add_stock_purchase_route(
    body: StockPurchaseCreate,
    store: RecordStore = Depends(get_store),
):
    try:
        return add_stock_purchase(store, body.amount, body.description, body.date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/withdrawals", response_model=WithdrawalResponse, status_code=status.HTTP_201_CREATED)
def withdraw_route(
    body: WithdrawalCreate,
    store: RecordStore = Depends(get_store),
):
    """
    Take money out of the owner's personal balance.
    Fails with 409 when the amount exceeds the balance.
    """
    try:
        return withdraw(store, body.amount, body.note, body.date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/injections", response_model=CapitalInjectionResponse, status_code=status.HTTP_201_CREATED)
def add_injection_route(
    body: CapitalInjectionCreate,
    store: RecordStore = Depends(get_store),
):
    try:
        return add_injection(store, body.amount, body.source, body.date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/activity", response_model=ActivityFeedResponse)
def get_activity(store: RecordStore = Depends(get_store)):
    """Audit trail of stock purchases, withdrawals and capital injections."""
    entries = get_activity_feed(store)
    return ActivityFeedResponse(total=len(entries), entries=entries)
