# Storefront Cart Models

from .product import Product, ProductListResponse
from .cart import (
    CartItem,
    CartState,
    AddToCartRequest,
    RemoveFromCartRequest,
    UpdateQuantityRequest,
    MigrateCartRequest,
)

__all__ = [
    "Product",
    "ProductListResponse",
    "CartItem",
    "CartState",
    "AddToCartRequest",
    "RemoveFromCartRequest",
    "UpdateQuantityRequest",
    "MigrateCartRequest",
]
