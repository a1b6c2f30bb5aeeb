from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import Optional


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    image: str = Field("", max_length=255, description="Image reference")
    category: str = Field("", max_length=255, description="Catalog category")
    description: str = Field("", description="Free-form description")
    rating: float = Field(0, ge=0, le=5, description="Average rating")
    num_reviews: int = Field(0, ge=0, description="Number of reviews")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Unit price")
    count_in_stock: int = Field(..., ge=0, description="Available stock (must be non-negative)")


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    pass


class ProductUpdate(BaseModel):
    """Schema for patching a product. Omitted or null fields keep their value."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    image: Optional[str] = Field(None, max_length=255)
    category: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    num_reviews: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    count_in_stock: Optional[int] = Field(None, ge=0)


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
