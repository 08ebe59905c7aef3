from sqlalchemy.exc import IntegrityError
from typing import Optional, List

from boutique.core.exceptions import ProductNotFound
from boutique.core.store import RecordStore
from boutique.logger_config import logger
from boutique.models.product import Product, ProductCategory, generate_custom_id
from boutique.schemas.product import ProductCreate, ProductResponse, ProductUpdate


def get_product_by_id(store: RecordStore, product_id: str) -> Optional[ProductResponse]:
    """Get product by ID."""
    with store.session() as db:
        product = db.get(Product, product_id)
        return ProductResponse.model_validate(product) if product else None


def get_all_products(
    store: RecordStore,
    search: Optional[str] = None,
    category: Optional[ProductCategory] = None,
) -> tuple[List[ProductResponse], int]:
    """Get all products, optionally filtered by name and category."""
    with store.session() as db:
        query = db.query(Product)

        if category:
            query = query.filter(Product.category == category)

        if search and search.strip():
            query = query.filter(Product.name.ilike(f"%{search.strip()}%"))

        products = query.order_by(Product.created_at, Product.id).all()
        return [ProductResponse.model_validate(p) for p in products], len(products)


def create_product(store: RecordStore, data: ProductCreate) -> ProductResponse:
    """Create a new product."""
    with store.transaction("products") as db:
        product_id = data.id
        if product_id:
            if db.get(Product, product_id):
                raise ValueError("Product with this id already exists")
        else:
            # Ensure product_id is unique
            product_id = generate_custom_id("PRD")
            while db.get(Product, product_id):
                product_id = generate_custom_id("PRD")

        product = Product(
            id=product_id,
            name=data.name.strip(),
            category=data.category,
            quantity=data.quantity,
            cost_price=data.cost_price,
            sell_price=data.sell_price,
        )
        db.add(product)
        try:
            db.flush()
        except IntegrityError as e:
            logger.error(f"Error creating product: {str(e)}")
            raise ValueError("Failed to create product.")
        created = ProductResponse.model_validate(product)

    logger.info(f"Product {created.id} '{created.name}' created with {created.quantity} in stock")
    return created


def replace_product(store: RecordStore, product_id: str, data: ProductUpdate) -> ProductResponse:
    """
    Replace every editable field of a product in one write. The record keeps
    its id and is never absent from the collection.
    """
    with store.transaction("products") as db:
        product = db.get(Product, product_id)
        if not product:
            raise ProductNotFound(product_id)

        product.name = data.name.strip()
        product.category = data.category
        product.quantity = data.quantity
        product.cost_price = data.cost_price
        product.sell_price = data.sell_price
        db.flush()
        updated = ProductResponse.model_validate(product)

    logger.info(f"Product {product_id} replaced")
    return updated


def delete_product(store: RecordStore, product_id: str) -> bool:
    """Delete a product. Orders that name it fall back to the estimated cost."""
    with store.transaction("products") as db:
        product = db.get(Product, product_id)
        if not product:
            return False
        db.delete(product)

    logger.info(f"Product {product_id} deleted")
    return True
