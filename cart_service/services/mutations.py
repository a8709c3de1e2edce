"""
Cart mutations

Pure state transitions applied to a loaded cart before it is persisted. Each
returns a new CartState and leaves its input untouched.
"""

from ..core.errors import InvalidInput, NotFound
from ..database.products import ProductCatalog
from ..models.cart import CartItem, CartState


def _copy(cart: CartState) -> CartState:
    return cart.model_copy(deep=True)


def add_item(
    cart: CartState,
    product_id: int,
    quantity: int,
    catalog: ProductCatalog,
) -> CartState:
    """
    Add quantity of a product to the cart.

    An existing line is incremented; otherwise the catalog's current name,
    price and images are snapshotted into a new line.
    """
    if quantity <= 0:
        raise InvalidInput(f"Quantity must be positive, got {quantity}")

    product = catalog.get_product(product_id)
    if not product:
        raise NotFound(f"Unknown product {product_id}", public_message="Product not found.")

    updated = _copy(cart)
    existing = updated.find_item(product_id)

    if existing:
        existing.quantity += quantity
    else:
        updated.items.append(
            CartItem(
                id=product.id,
                name=product.name,
                price=product.price,
                quantity=quantity,
                image1=product.image1,
                image2=product.image2,
            )
        )

    return updated


def remove_item(cart: CartState, product_id: int) -> CartState:
    """Remove a product's line; absent products are ignored"""
    updated = _copy(cart)
    updated.items = [item for item in updated.items if item.id != product_id]
    return updated


def set_quantity(cart: CartState, product_id: int, quantity: int) -> CartState:
    """
    Overwrite the quantity of a line already in the cart.

    Zero removes the line (and is a no-op when it is absent). A positive
    quantity for a product never added raises NotFound.
    """
    if quantity < 0:
        raise InvalidInput(f"Quantity must not be negative, got {quantity}")

    updated = _copy(cart)
    existing = updated.find_item(product_id)

    if not existing:
        if quantity == 0:
            return updated
        raise NotFound(f"Item {product_id} not in cart", public_message="Item not found in cart.")

    if quantity == 0:
        updated.items = [item for item in updated.items if item.id != product_id]
    else:
        existing.quantity = quantity

    return updated


def replace_cart(cart: CartState, new_state: CartState) -> CartState:
    """Take a submitted cart wholesale as the new contents"""
    return _copy(new_state)


def clear_cart(cart: CartState) -> CartState:
    return CartState.empty()
