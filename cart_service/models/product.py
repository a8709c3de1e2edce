"""Product models for the storefront catalog"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class Product(BaseModel):
    """Product in the catalog"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str = ""
    price: float = Field(gt=0)
    currency: str = "USD"
    image1: Optional[str] = None
    image2: Optional[str] = None


class ProductListResponse(BaseModel):
    """Response listing the catalog"""
    products: list[Product]
    total: int
