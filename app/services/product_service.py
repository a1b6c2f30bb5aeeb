from datetime import datetime, timezone
from typing import List, Optional
import logging

from app.schemas.product import ProductCreate, ProductUpdate
from app.storer.base import Storer
from app.storer.context import Context
from app.storer.entities import Product

logger = logging.getLogger(__name__)


def merge_product_patch(product: Product, patch: ProductUpdate, now: datetime) -> Product:
    """
    Apply a partial update to a product and return the merged copy.

    Only fields present in the patch with a non-null value replace the
    current ones. ``updated_at`` is always set to ``now``. The input
    product is not modified.

    Args:
        product: Current stored product
        patch: Client-supplied partial update
        now: Timestamp to record as the update time

    Returns:
        New Product ready for a full-row overwrite
    """
    changes = {
        field: value
        for field, value in patch.model_dump(exclude_unset=True).items()
        if value is not None
    }
    changes["updated_at"] = now
    return product.model_copy(update=changes)


class ProductService:
    """
    Service class for Product operations.

    Supplies timestamps and merges partial updates; persistence is delegated
    to the storer, one storer call per operation except update, which reads
    the current row before overwriting it.
    """

    def __init__(self, storer: Storer):
        self.storer = storer

    def create(self, product_data: ProductCreate, ctx: Optional[Context] = None) -> Product:
        product = Product(
            **product_data.model_dump(),
            created_at=datetime.now(timezone.utc),
        )
        product = self.storer.create_product(product, ctx)
        logger.info(f"Product #{product.id} created")
        return product

    def get_by_id(self, product_id: int, ctx: Optional[Context] = None) -> Product:
        return self.storer.get_product(product_id, ctx)

    def get_all(self, ctx: Optional[Context] = None) -> List[Product]:
        return self.storer.list_products(ctx)

    def update(self, product_id: int, product_data: ProductUpdate, ctx: Optional[Context] = None) -> Product:
        """
        Patch an existing product.

        Raises:
            NotFoundError: If the product does not exist
            WriteError: If the overwrite is rejected
        """
        current = self.storer.get_product(product_id, ctx)
        merged = merge_product_patch(current, product_data, datetime.now(timezone.utc))
        return self.storer.update_product(merged, ctx)

    def delete(self, product_id: int, ctx: Optional[Context] = None) -> None:
        self.storer.delete_product(product_id, ctx)
        logger.info(f"Product #{product_id} deleted")
