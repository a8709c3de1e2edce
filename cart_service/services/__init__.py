# Cart domain services

from .mutations import (
    add_item,
    remove_item,
    set_quantity,
    replace_cart,
    clear_cart,
)
from .migration import merge_carts, migrate_guest_cart

__all__ = [
    "add_item",
    "remove_item",
    "set_quantity",
    "replace_cart",
    "clear_cart",
    "merge_carts",
    "migrate_guest_cart",
]
