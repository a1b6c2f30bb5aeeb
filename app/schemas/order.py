from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


class OrderItemCreate(BaseModel):
    """One line of a new order."""
    name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=1, description="Quantity to purchase")
    image: str = Field("", max_length=255)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Unit price")
    product_id: int = Field(..., description="ID of the product being purchased")


class OrderCreate(BaseModel):
    """
    Schema for creating a new order.

    Amounts are computed by the client and stored as given.
    """
    payment_method: str = Field(..., min_length=1, max_length=64)
    tax_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    shipping_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    total_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderItemResponse(BaseModel):
    """Schema for an order item in responses."""
    id: int
    name: str
    quantity: int
    image: str
    price: Decimal
    product_id: int
    order_id: int

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Schema for order response."""
    id: int
    user_id: int
    payment_method: str
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[OrderItemResponse]

    model_config = ConfigDict(from_attributes=True)
