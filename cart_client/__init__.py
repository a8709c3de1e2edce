# Client cart mirror

from .mirror import CartMirror
from .reducer import (
    CartState,
    CartAction,
    Hydrate,
    ToggleCart,
    CloseCart,
    SetCartUrl,
    UpdateCart,
    cart_reducer,
)

__all__ = [
    "CartMirror",
    "CartState",
    "CartAction",
    "Hydrate",
    "ToggleCart",
    "CloseCart",
    "SetCartUrl",
    "UpdateCart",
    "cart_reducer",
]
