from contextlib import contextmanager
from datetime import datetime, timezone
from itertools import groupby
from typing import Dict, Iterator, List, Optional
import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from app.models.order import OrderItemModel, OrderModel
from app.models.product import ProductModel
from app.storer.base import Storer
from app.storer.context import Context
from app.storer.entities import Order, OrderItem, Product
from app.storer.errors import (
    IDAssignmentError,
    NotFoundError,
    ReadError,
    StorerError,
    WriteError,
)

logger = logging.getLogger(__name__)

products_table = ProductModel.__table__
orders_table = OrderModel.__table__
order_items_table = OrderItemModel.__table__

# Upper bound on ids per IN (...) clause when fetching items for many orders
ITEM_FETCH_CHUNK_SIZE = 500


def _describe(exc: SQLAlchemyError) -> str:
    """Short message for a driver error, without the SQL echo."""
    return str(getattr(exc, "orig", None) or exc)


class SQLStorer(Storer):
    """
    Relational implementation of :class:`Storer` on top of SQLAlchemy Core.

    TRANSACTION STRATEGY:
    =====================
    Each write opens its own connection with ``engine.begin()``. The block
    commits when it exits cleanly and rolls back on any exception, including
    cancellation and KeyboardInterrupt, so a transaction is never left open
    and a connection is never reused after commit or rollback.

    Order aggregates are written as:

    1. BEGIN
    2. INSERT the order row, read its generated id
    3. INSERT each item with that order id, read each generated id
    4. COMMIT (or ROLLBACK on the first failure)

    Ids are copied into the caller's objects only after COMMIT, so a failed
    create leaves the input untouched.

    Concurrent writes to the same order rely on the database's row locks and
    isolation level. Read committed or stronger is required; there is no
    in-process locking.

    Reads avoid a database-side JOIN: the parent rows are fetched first, then
    the item rows, and items are attached by matching ``order_id``.
    """

    def __init__(self, engine: Engine, batch_item_fetch: bool = True):
        self.engine = engine
        self.batch_item_fetch = batch_item_fetch

    # --- Scoped acquisition ------------------------------------------------

    @contextmanager
    def _transaction(self, step: str) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except StorerError as e:
            logger.warning(f"Rolled back {step}: {e}")
            raise
        except SQLAlchemyError as e:
            # Failures from BEGIN or COMMIT themselves
            logger.error(f"Transaction failed while {step}: {_describe(e)}")
            raise WriteError(step, _describe(e)) from e

    @contextmanager
    def _connection(self, step: str) -> Iterator[Connection]:
        try:
            with self.engine.connect() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise ReadError(step, _describe(e)) from e

    # --- Statement helpers -------------------------------------------------

    def _insert(self, conn: Connection, table, values: dict, what: str) -> int:
        try:
            result = conn.execute(insert(table).values(**values))
        except SQLAlchemyError as e:
            raise WriteError(f"inserting {what}", _describe(e)) from e
        return self._inserted_id(result, what)

    @staticmethod
    def _inserted_id(result: CursorResult, what: str) -> int:
        step = f"getting last insert id for {what}"
        try:
            key = result.inserted_primary_key
        except SQLAlchemyError as e:
            raise IDAssignmentError(step, _describe(e)) from e
        if not key or key[0] is None:
            raise IDAssignmentError(step, "store did not report a generated id")
        return key[0]

    @staticmethod
    def _write(conn: Connection, statement, step: str) -> CursorResult:
        try:
            return conn.execute(statement)
        except SQLAlchemyError as e:
            raise WriteError(step, _describe(e)) from e

    @staticmethod
    def _read(conn: Connection, statement, step: str) -> list:
        try:
            return conn.execute(statement).all()
        except SQLAlchemyError as e:
            raise ReadError(step, _describe(e)) from e

    # --- Products ----------------------------------------------------------

    def create_product(self, product: Product, ctx: Optional[Context] = None) -> Product:
        ctx = ctx or Context.background()
        values = {
            "name": product.name,
            "image": product.image,
            "category": product.category,
            "description": product.description,
            "rating": product.rating,
            "num_reviews": product.num_reviews,
            "price": product.price,
            "count_in_stock": product.count_in_stock,
            "created_at": product.created_at,
            "updated_at": None,
        }
        with self._transaction("creating product") as conn:
            ctx.check("inserting product")
            product_id = self._insert(conn, products_table, values, "product")

        product.id = product_id
        product.updated_at = None
        return product

    def get_product(self, product_id: int, ctx: Optional[Context] = None) -> Product:
        ctx = ctx or Context.background()
        with self._connection("getting product") as conn:
            ctx.check("getting product")
            rows = self._read(
                conn,
                select(products_table).where(products_table.c.id == product_id),
                "getting product",
            )
        if not rows:
            raise NotFoundError("getting product", f"product {product_id} not found")
        return Product.model_validate(dict(rows[0]._mapping))

    def list_products(self, ctx: Optional[Context] = None) -> List[Product]:
        ctx = ctx or Context.background()
        with self._connection("listing products") as conn:
            ctx.check("listing products")
            rows = self._read(
                conn,
                select(products_table).order_by(products_table.c.id),
                "listing products",
            )
        return [Product.model_validate(dict(row._mapping)) for row in rows]

    def update_product(self, product: Product, ctx: Optional[Context] = None) -> Product:
        ctx = ctx or Context.background()
        updated_at = product.updated_at or datetime.now(timezone.utc)
        statement = (
            update(products_table)
            .where(products_table.c.id == product.id)
            .values(
                name=product.name,
                image=product.image,
                category=product.category,
                description=product.description,
                rating=product.rating,
                num_reviews=product.num_reviews,
                price=product.price,
                count_in_stock=product.count_in_stock,
                updated_at=updated_at,
            )
        )
        with self._transaction("updating product") as conn:
            ctx.check("updating product")
            result = self._write(conn, statement, "updating product")
            if result.rowcount == 0:
                raise WriteError("updating product", f"product {product.id} not found")

        product.updated_at = updated_at
        return product

    def delete_product(self, product_id: int, ctx: Optional[Context] = None) -> None:
        ctx = ctx or Context.background()
        with self._transaction("deleting product") as conn:
            ctx.check("deleting product")
            self._write(
                conn,
                delete(products_table).where(products_table.c.id == product_id),
                "deleting product",
            )

    # --- Orders ------------------------------------------------------------

    def create_order(self, order: Order, ctx: Optional[Context] = None) -> Order:
        """
        Insert the order row and every item row in one transaction.

        Raises:
            ValueError: If the order has no items (checked before any I/O)
            WriteError: If any insert is rejected; nothing is committed
            IDAssignmentError: If a generated id cannot be read back
        """
        if not order.items:
            raise ValueError("an order must contain at least one item")

        ctx = ctx or Context.background()
        order_values = {
            "user_id": order.user_id,
            "payment_method": order.payment_method,
            "tax_price": order.tax_price,
            "shipping_price": order.shipping_price,
            "total_price": order.total_price,
            "created_at": order.created_at,
            "updated_at": None,
        }

        item_ids = []
        with self._transaction("creating order") as conn:
            ctx.check("inserting order")
            order_id = self._insert(conn, orders_table, order_values, "order")

            for item in order.items:
                ctx.check("inserting order item")
                item_values = {
                    "name": item.name,
                    "quantity": item.quantity,
                    "image": item.image,
                    "price": item.price,
                    "product_id": item.product_id,
                    "order_id": order_id,
                }
                item_ids.append(self._insert(conn, order_items_table, item_values, "order item"))

        order.id = order_id
        order.updated_at = None
        for item, item_id in zip(order.items, item_ids):
            item.id = item_id
            item.order_id = order_id

        logger.info(f"Order #{order_id} created with {len(item_ids)} item(s)")
        return order

    def get_order(self, order_id: int, ctx: Optional[Context] = None) -> Order:
        ctx = ctx or Context.background()
        with self._connection("getting order") as conn:
            ctx.check("getting order")
            rows = self._read(
                conn,
                select(orders_table).where(orders_table.c.id == order_id),
                "getting order",
            )
            if not rows:
                raise NotFoundError("getting order", f"order {order_id} not found")

            order = Order.model_validate(dict(rows[0]._mapping))
            ctx.check("getting order items")
            order.items = self._fetch_items(conn, order.id)
        return order

    def list_orders(self, ctx: Optional[Context] = None) -> List[Order]:
        """
        Fetch all orders, then their items.

        With ``batch_item_fetch`` the items for all orders come from
        ``WHERE order_id IN (...)`` queries (chunked), otherwise one query per
        order. Any failure aborts the whole call; no partial list is returned.
        """
        ctx = ctx or Context.background()
        with self._connection("listing orders") as conn:
            ctx.check("listing orders")
            rows = self._read(
                conn,
                select(orders_table).order_by(orders_table.c.id),
                "listing orders",
            )
            orders = [Order.model_validate(dict(row._mapping)) for row in rows]
            if not orders:
                return []

            if self.batch_item_fetch:
                items_by_order = self._fetch_items_batched(conn, [o.id for o in orders], ctx)
                for order in orders:
                    order.items = items_by_order.get(order.id, [])
            else:
                for order in orders:
                    ctx.check("getting order items")
                    order.items = self._fetch_items(conn, order.id)
        return orders

    def delete_order(self, order_id: int, ctx: Optional[Context] = None) -> None:
        ctx = ctx or Context.background()
        with self._transaction("deleting order") as conn:
            ctx.check("deleting order items")
            self._write(
                conn,
                delete(order_items_table).where(order_items_table.c.order_id == order_id),
                "deleting order items",
            )
            ctx.check("deleting order")
            self._write(
                conn,
                delete(orders_table).where(orders_table.c.id == order_id),
                "deleting order",
            )
        logger.info(f"Order #{order_id} deleted")

    # --- Item reconstruction ----------------------------------------------

    def _fetch_items(self, conn: Connection, order_id: int) -> List[OrderItem]:
        rows = self._read(
            conn,
            select(order_items_table)
            .where(order_items_table.c.order_id == order_id)
            .order_by(order_items_table.c.id),
            "getting order items",
        )
        return [OrderItem.model_validate(dict(row._mapping)) for row in rows]

    def _fetch_items_batched(
        self, conn: Connection, order_ids: List[int], ctx: Context
    ) -> Dict[int, List[OrderItem]]:
        items_by_order: Dict[int, List[OrderItem]] = {}
        for start in range(0, len(order_ids), ITEM_FETCH_CHUNK_SIZE):
            chunk = order_ids[start:start + ITEM_FETCH_CHUNK_SIZE]
            ctx.check("getting order items")
            rows = self._read(
                conn,
                select(order_items_table)
                .where(order_items_table.c.order_id.in_(chunk))
                .order_by(order_items_table.c.order_id, order_items_table.c.id),
                "getting order items",
            )
            items = [OrderItem.model_validate(dict(row._mapping)) for row in rows]
            for order_id, group in groupby(items, key=lambda item: item.order_id):
                items_by_order[order_id] = list(group)
        return items_by_order
