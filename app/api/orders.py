from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from app.api.dependencies import get_context
from app.config import get_settings
from app.database import get_storer
from app.services.order_service import OrderService
from app.schemas.order import OrderCreate, OrderResponse
from app.storer.base import Storer
from app.storer.context import Context
from app.storer.errors import NotFoundError
from app.tasks.order_tasks import notify_order_created

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "/",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new order",
    description="""
    Create an order with one or more items.

    The order row and all item rows are written in a single transaction:
    either everything is stored or nothing is.

    After the order is committed, a background Celery task sends the
    order notification.
    """
)
def create_order(
    order_data: OrderCreate,
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    """
    Create an order.

    - **payment_method**: Payment label (required)
    - **tax_price**, **shipping_price**, **total_price**: Amounts, stored as given
    - **items**: At least one item with name, quantity, price and product_id
    """
    settings = get_settings()
    service = OrderService(storer)

    # No authentication yet; every order belongs to the configured user
    order = service.create_order(order_data, settings.DEFAULT_USER_ID, ctx)

    if settings.NOTIFY_ON_ORDER_CREATED:
        notify_order_created.delay(order.id)

    return order


@router.get(
    "/",
    response_model=List[OrderResponse],
    summary="List all orders",
    description="Get every order with its items."
)
def list_orders(
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    service = OrderService(storer)
    return service.get_orders(ctx)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
    description="Get an order together with its items."
)
def get_order(
    order_id: int,
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    service = OrderService(storer)

    try:
        return service.get_order(order_id, ctx)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with ID {order_id} not found"
        )


@router.delete(
    "/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an order",
    description="Delete an order and all of its items in one transaction."
)
def delete_order(
    order_id: int,
    storer: Storer = Depends(get_storer),
    ctx: Context = Depends(get_context)
):
    service = OrderService(storer)
    service.delete_order(order_id, ctx)
    return None
