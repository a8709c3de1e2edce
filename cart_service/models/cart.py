"""Cart models for the storefront"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


class CartItem(BaseModel):
    """Line item in a shopping cart, snapshotted from the catalog"""
    id: int
    name: str
    price: float
    quantity: int = Field(gt=0)
    image1: Optional[str] = None
    image2: Optional[str] = None


class CartState(BaseModel):
    """Shopping cart document as stored and returned to clients"""

    model_config = ConfigDict(populate_by_name=True)

    items: list[CartItem] = []
    is_open: bool = Field(default=False, alias="isOpen")
    cart_url: str = Field(default="", alias="cartUrl")

    @field_validator("items")
    @classmethod
    def unique_item_ids(cls, items: list[CartItem]) -> list[CartItem]:
        seen = set()
        for item in items:
            if item.id in seen:
                raise ValueError(f"Duplicate cart item id {item.id}")
            seen.add(item.id)
        return items

    @classmethod
    def empty(cls) -> "CartState":
        """Canonical empty cart"""
        return cls(items=[], is_open=False, cart_url="")

    def find_item(self, product_id: int) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == product_id), None)

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    id: StrictInt
    quantity: StrictInt


class RemoveFromCartRequest(BaseModel):
    """Request to remove item from cart"""
    id: StrictInt


class UpdateQuantityRequest(BaseModel):
    """Request to set item quantity in cart"""
    id: StrictInt
    quantity: StrictInt


class MigrateCartRequest(BaseModel):
    """Request to merge a guest cart into a wallet cart"""

    model_config = ConfigDict(populate_by_name=True)

    guest_session_id: str = Field(alias="guestSessionId", min_length=1)
    wallet_id: str = Field(alias="walletId", min_length=1)
