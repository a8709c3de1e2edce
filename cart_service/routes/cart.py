"""Cart API routes for the storefront"""

import logging
from fastapi import APIRouter, Depends

from ..core.errors import UnauthenticatedMerge
from ..core.identity import (
    CartIdentifier,
    IdentifierResolver,
    get_cart_identifier,
    get_identifier_resolver,
)
from ..database.carts import CartStore, get_cart_store
from ..database.products import ProductCatalog, get_product_catalog
from ..models.cart import (
    CartState,
    AddToCartRequest,
    RemoveFromCartRequest,
    UpdateQuantityRequest,
    MigrateCartRequest,
)
from ..services import mutations
from ..services.migration import migrate_guest_cart

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.post("/add", response_model=CartState)
async def add_to_cart(
    request: AddToCartRequest,
    identifier: CartIdentifier = Depends(get_cart_identifier),
    store: CartStore = Depends(get_cart_store),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    """Add an item to the cart, incrementing it if already present"""
    path = store.path(identifier)
    cart = await store.load(path, tag="add")

    cart = mutations.add_item(cart, request.id, request.quantity, catalog)

    await store.save(path, cart)
    logger.info(f"[add] Added {request.quantity}x product {request.id} to {path}")
    return store.response(path, cart)


@router.post("/remove", response_model=CartState)
async def remove_from_cart(
    request: RemoveFromCartRequest,
    identifier: CartIdentifier = Depends(get_cart_identifier),
    store: CartStore = Depends(get_cart_store),
):
    """Remove an item from the cart"""
    path = store.path(identifier)
    cart = await store.load(path, tag="remove")

    cart = mutations.remove_item(cart, request.id)

    await store.save(path, cart)
    logger.info(f"[remove] Removed product {request.id} from {path}")
    return store.response(path, cart)


@router.post("/update-quantity", response_model=CartState)
async def update_quantity(
    request: UpdateQuantityRequest,
    identifier: CartIdentifier = Depends(get_cart_identifier),
    store: CartStore = Depends(get_cart_store),
):
    """
    Set the quantity of an item already in the cart.

    Quantity 0 removes the item. Setting a positive quantity on an item
    that is not in the cart is a 404.
    """
    logger.info(
        f"[update-quantity] Received request: id={request.id}, "
        f"quantity={request.quantity}, owner={identifier.kind.value}"
    )
    path = store.path(identifier)
    cart = await store.load(path, tag="update-quantity")

    updated = mutations.set_quantity(cart, request.id, request.quantity)

    if updated != cart:
        await store.save(path, updated)
        logger.info(f"[update-quantity] Set product {request.id} to {request.quantity} in {path}")
    return store.response(path, updated)


@router.get("/storage", response_model=CartState)
async def get_cart(
    identifier: CartIdentifier = Depends(get_cart_identifier),
    store: CartStore = Depends(get_cart_store),
):
    """Fetch the current cart"""
    path = store.path(identifier)
    cart = await store.load(path, tag="storage")
    return store.response(path, cart)


@router.post("/storage", response_model=CartState)
async def store_cart(
    request: CartState,
    identifier: CartIdentifier = Depends(get_cart_identifier),
    store: CartStore = Depends(get_cart_store),
):
    """Replace the whole cart with the submitted state"""
    path = store.path(identifier)
    cart = mutations.replace_cart(CartState.empty(), request)

    await store.save(path, cart)
    logger.info(f"[storage] Replaced cart at {path} ({len(cart.items)} items)")
    return store.response(path, cart)


@router.post("/clear", response_model=CartState)
async def clear_cart(
    identifier: CartIdentifier = Depends(get_cart_identifier),
    store: CartStore = Depends(get_cart_store),
):
    """Clear all items from cart"""
    path = store.path(identifier)
    cart = mutations.clear_cart(await store.load(path, tag="clear"))

    await store.save(path, cart)
    logger.info(f"[clear] Cleared cart at {path}")
    return store.response(path, cart)


@router.post("/migrate", response_model=CartState)
async def migrate_cart(
    request: MigrateCartRequest,
    resolver: IdentifierResolver = Depends(get_identifier_resolver),
    store: CartStore = Depends(get_cart_store),
):
    """
    Merge the caller's guest cart into a wallet cart.

    The guest session id must match the caller's own session cookie, so a
    caller can only migrate the cart they hold.
    """
    if not resolver.validate_session(request.guest_session_id):
        raise UnauthenticatedMerge(
            f"Session {request.guest_session_id} does not match caller cookie"
        )

    merged = await migrate_guest_cart(store, request.guest_session_id, request.wallet_id)
    if merged is not None:
        return merged

    wallet_path = store.path(CartIdentifier.wallet(request.wallet_id))
    wallet_cart = await store.load(wallet_path, tag="migrate")
    return store.response(wallet_path, wallet_cart)
