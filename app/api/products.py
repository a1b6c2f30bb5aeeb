from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from app.api.dependencies import get_context
from app.database import get_storer
from app.services.product_service import ProductService
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)
from app.storer.base import Storer
from app.storer.context import Context
from app.storer.errors import NotFoundError

router = APIRouter(prefix="/products", tags=["Products"])


@router.post(
    "/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new catalog product."
)
def create_product(
    product_data: ProductCreate,
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    """
    Create a new product.

    - **name**: Product name (required)
    - **price**: Unit price, must be positive (required)
    - **count_in_stock**: Initial stock, must be non-negative (required)
    """
    service = ProductService(storer)
    return service.create(product_data, ctx)


@router.get(
    "/",
    response_model=List[ProductResponse],
    summary="List all products",
    description="Get every product in store order."
)
def list_products(
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    service = ProductService(storer)
    return service.get_all(ctx)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID"
)
def get_product(
    product_id: int,
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    service = ProductService(storer)

    try:
        return service.get_by_id(product_id, ctx)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found"
        )


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Update product details. Only provided fields will be changed."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    """
    Patch a product.

    The stored product is read, merged with the provided fields, and
    written back as a whole.
    """
    service = ProductService(storer)

    try:
        return service.update(product_id, product_data, ctx)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found"
        )


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product"
)
def delete_product(
    product_id: int,
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    service = ProductService(storer)
    service.delete(product_id, ctx)
    return None
