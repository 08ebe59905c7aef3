from fastapi import APIRouter, Depends, HTTPException, Response, status

from boutique.core.config import settings
from boutique.core.dependencies import get_store
from boutique.core.store import RecordStore
from boutique.schemas.order import OrderListResponse, OrderResponse, SaleCreate
from boutique.services.backup_service import export_sales_csv, sales_report_filename
from boutique.services.sale_service import get_all_orders, record_sale

router = APIRouter()


@router.get("", response_model=OrderListResponse)
def get_orders(store: RecordStore = Depends(get_store)):
    orders, total, total_amount = get_all_orders(store)
    return OrderListResponse(total=total, total_amount=total_amount, orders=orders)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def record_sale_route(
    sale: SaleCreate,
    store: RecordStore = Depends(get_store),
):
    """
    Record a sale: creates a Paid order and takes the units out of stock.
    """
    try:
        return record_sale(store, sale.product_name, sale.quantity)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/export")
def export_orders_csv(store: RecordStore = Depends(get_store)):
    """Download every order as a CSV sales report."""
    orders, total, _ = get_all_orders(store)
    if total == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No orders to export yet!"
        )

    return Response(
        content=export_sales_csv(orders, currency=settings.CURRENCY),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{sales_report_filename()}"'},
    )
