from abc import ABC, abstractmethod
from typing import List, Optional

from app.storer.context import Context
from app.storer.entities import Order, Product


class Storer(ABC):
    """
    Persistence contract for products and order aggregates.

    Implementations raise :mod:`app.storer.errors` exceptions on failure and
    never retry internally. Every method accepts an optional ``ctx``; when it
    is omitted the call runs without a deadline.
    """

    # --- Products ----------------------------------------------------------

    @abstractmethod
    def create_product(self, product: Product, ctx: Optional[Context] = None) -> Product:
        """Insert a product and populate its id."""

    @abstractmethod
    def get_product(self, product_id: int, ctx: Optional[Context] = None) -> Product:
        """Return the product or raise NotFoundError."""

    @abstractmethod
    def list_products(self, ctx: Optional[Context] = None) -> List[Product]:
        """Return every product in store order."""

    @abstractmethod
    def update_product(self, product: Product, ctx: Optional[Context] = None) -> Product:
        """
        Overwrite the full row identified by ``product.id``.

        The product must be fully merged by the caller. ``updated_at`` is
        written as given (the current time when it is None); callers must
        not pass a value older than the stored one.
        """

    @abstractmethod
    def delete_product(self, product_id: int, ctx: Optional[Context] = None) -> None:
        """Delete the product row."""

    # --- Orders ------------------------------------------------------------

    @abstractmethod
    def create_order(self, order: Order, ctx: Optional[Context] = None) -> Order:
        """Insert an order and all of its items atomically."""

    @abstractmethod
    def get_order(self, order_id: int, ctx: Optional[Context] = None) -> Order:
        """Return the order with its items attached."""

    @abstractmethod
    def list_orders(self, ctx: Optional[Context] = None) -> List[Order]:
        """Return every order with its items attached."""

    @abstractmethod
    def delete_order(self, order_id: int, ctx: Optional[Context] = None) -> None:
        """Delete an order and all of its items atomically."""
