from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import update

from boutique.core.exceptions import InsufficientStock, ProductNotFound
from boutique.core.store import RecordStore
from boutique.logger_config import logger
from boutique.models.order import Order, OrderStatus
from boutique.models.product import Product
from boutique.schemas.order import OrderResponse
from boutique.services.ledger import find_product
from boutique.utils.dates import today


def record_sale(
    store: RecordStore,
    product_name: str,
    quantity: int,
    sale_date: Optional[date] = None,
) -> OrderResponse:
    """
    Sell `quantity` units of the product named `product_name`.

    The stock decrement and the new order are committed together. The
    decrement is a conditional UPDATE evaluated by the database, so two sales
    racing for the last units cannot both succeed.
    """
    if quantity <= 0:
        raise ValueError("Sale quantity must be greater than 0")

    with store.transaction("products", "orders") as db:
        products = db.query(Product).order_by(Product.created_at, Product.id).all()
        product = find_product(products, product_name)
        if product is None:
            logger.warning(f"Sale rejected: no product named '{product_name}'")
            raise ProductNotFound(product_name)

        result = db.execute(
            update(Product)
            .where(Product.id == product.id, Product.quantity >= quantity)
            .values(quantity=Product.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            available = db.query(Product.quantity).filter(Product.id == product.id).scalar() or 0
            logger.warning(
                f"Sale rejected: {quantity} x '{product.name}' requested, {available} available"
            )
            raise InsufficientStock(product.name, quantity, available)

        order = Order(
            product_name=product.name,
            quantity=quantity,
            total_amount=Decimal(product.sell_price) * quantity,
            date=sale_date or today(),
            status=OrderStatus.Paid,
        )
        db.add(order)
        db.flush()
        recorded = OrderResponse.model_validate(order)

    logger.info(
        f"Sale {recorded.id}: {quantity} x '{recorded.product_name}' for {recorded.total_amount}"
    )
    return recorded


def get_all_orders(store: RecordStore) -> Tuple[List[OrderResponse], int, Decimal]:
    """All orders oldest first, with count and revenue."""
    with store.session() as db:
        rows = db.query(Order).order_by(Order.created_at, Order.id).all()
        orders = [OrderResponse.model_validate(o) for o in rows]
    total_amount = sum((o.total_amount for o in orders), Decimal("0"))
    return orders, len(orders), total_amount
