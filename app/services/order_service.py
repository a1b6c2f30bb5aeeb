from datetime import datetime, timezone
from typing import List, Optional
import logging

from app.schemas.order import OrderCreate
from app.storer.base import Storer
from app.storer.context import Context
from app.storer.entities import Order, OrderItem

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service class for Order operations.

    The service stamps the owning user and creation time onto new orders and
    hands the aggregate to the storer, which owns the transaction. Totals are
    taken from the request verbatim.
    """

    def __init__(self, storer: Storer):
        self.storer = storer

    def create_order(self, order_data: OrderCreate, user_id: int, ctx: Optional[Context] = None) -> Order:
        """
        Create an order with all of its items.

        Args:
            order_data: Validated request payload (at least one item)
            user_id: Owner of the new order
            ctx: Cancellation/deadline token

        Returns:
            The created order with ids populated

        Raises:
            WriteError: If the order or any item could not be written
        """
        order = Order(
            user_id=user_id,
            payment_method=order_data.payment_method,
            tax_price=order_data.tax_price,
            shipping_price=order_data.shipping_price,
            total_price=order_data.total_price,
            created_at=datetime.now(timezone.utc),
            items=[OrderItem(**item.model_dump()) for item in order_data.items],
        )
        order = self.storer.create_order(order, ctx)
        logger.info(f"Order #{order.id} created for user #{user_id}")
        return order

    def get_order(self, order_id: int, ctx: Optional[Context] = None) -> Order:
        """Get an order by ID."""
        return self.storer.get_order(order_id, ctx)

    def get_orders(self, ctx: Optional[Context] = None) -> List[Order]:
        """Get every order with its items."""
        return self.storer.list_orders(ctx)

    def delete_order(self, order_id: int, ctx: Optional[Context] = None) -> None:
        self.storer.delete_order(order_id, ctx)
