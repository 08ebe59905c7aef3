from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional

from boutique.core.dependencies import get_store
from boutique.core.store import RecordStore
from boutique.models.product import ProductCategory
from boutique.services.product_service import (
    get_product_by_id,
    get_all_products,
    create_product,
    replace_product,
    delete_product,
)
from boutique.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    ProductDeleteResponse,
)
from boutique.logger_config import logger

router = APIRouter()


@router.get("", response_model=ProductListResponse)
def get_products(
    search: Optional[str] = Query(None),
    category: Optional[ProductCategory] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """
    Get all products, filtered by name (case-insensitive) and category.
    """
    products, total = get_all_products(store, search=search, category=category)
    return ProductListResponse(total=total, products=products)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    store: RecordStore = Depends(get_store),
):
    product = get_product_by_id(store, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product_route(
    product_data: ProductCreate,
    store: RecordStore = Depends(get_store),
):
    """
    Create a new product.
    """
    try:
        return create_product(store, product_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.put("/{product_id}", response_model=ProductResponse)
def replace_product_route(
    product_id: str,
    product_data: ProductUpdate,
    store: RecordStore = Depends(get_store),
):
    """
    Replace a product's details in place; the id is kept.
    """
    try:
        return replace_product(store, product_id, product_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.delete("/{product_id}", response_model=ProductDeleteResponse)
def delete_product_route(
    product_id: str,
    store: RecordStore = Depends(get_store),
):
    if not delete_product(store, product_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )

    logger.info(f"Product {product_id} removed via API")
    return ProductDeleteResponse(message="Product deleted successfully")
