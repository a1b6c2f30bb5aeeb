"""
Plain records exchanged between the storer and its callers.

They carry no behaviour. Timestamps are timezone-aware; ``updated_at`` is
``None`` until the entity has been updated at least once.
"""
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

# Matches the Numeric(10, 2) columns; out-of-scale amounts are rejected, not rounded
Money = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class Product(BaseModel):
    """A catalog entry."""
    id: int = 0
    name: str
    image: str = ""
    category: str = ""
    description: str = ""
    rating: float = 0
    num_reviews: int = 0
    price: Money
    count_in_stock: int = 0
    created_at: AwareDatetime
    updated_at: Optional[AwareDatetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderItem(BaseModel):
    """One line of an order. Exists only as part of its parent order."""
    id: int = 0
    name: str
    quantity: int = Field(..., gt=0)
    image: str = ""
    price: Money
    product_id: int
    order_id: int = 0

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    """An order aggregate: the parent row plus its items in insertion order."""
    id: int = 0
    user_id: int
    payment_method: str
    tax_price: Money
    shipping_price: Money
    total_price: Money
    created_at: AwareDatetime
    updated_at: Optional[AwareDatetime] = None
    items: List[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
