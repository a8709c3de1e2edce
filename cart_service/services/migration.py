"""
Guest to wallet cart migration

When a guest signs in with a wallet, whatever they put in their guest cart is
folded into the wallet cart and the guest cart is emptied. The merge is
additive: a product present in both carts ends up with the summed quantity.

The wallet write and the guest reset are two separate blob writes. A failure
between them leaves the guest cart populated; re-running the migration then
adds its quantities a second time.
"""

import logging
from typing import Optional

from ..core.identity import CartIdentifier
from ..database.carts import CartStore
from ..models.cart import CartState

logger = logging.getLogger(__name__)


def merge_carts(wallet: CartState, guest: CartState) -> CartState:
    """
    Combine guest items into the wallet cart.

    Wallet lines keep their order; guest-only lines are appended in guest
    order. Quantities of lines present in both are summed.
    """
    merged = wallet.model_copy(deep=True)

    for guest_item in guest.items:
        existing = merged.find_item(guest_item.id)
        if existing:
            existing.quantity += guest_item.quantity
        else:
            merged.items.append(guest_item.model_copy())

    return merged


async def migrate_guest_cart(
    store: CartStore,
    guest_session_id: str,
    wallet_id: str,
) -> Optional[CartState]:
    """
    Merge the guest cart into the wallet cart and reset the guest cart.

    Returns the stored wallet cart, or None when there was no guest cart and
    nothing was written. Raises CorruptSource when the guest document cannot
    be parsed.
    """
    guest_path = store.path(CartIdentifier.guest(guest_session_id))
    wallet_path = store.path(CartIdentifier.wallet(wallet_id))

    guest_cart = await store.load_strict(guest_path, tag="migrate")
    if guest_cart is None:
        logger.info("[migrate] No guest cart to migrate")
        return None

    # A corrupt wallet document is treated as empty and overwritten
    wallet_cart = await store.load(wallet_path, tag="migrate")

    merged = merge_carts(wallet_cart, guest_cart)
    merged.cart_url = store.url(wallet_path)

    await store.save(wallet_path, merged)
    logger.info(
        f"[migrate] Merged {len(guest_cart.items)} guest items into {wallet_path} "
        f"({len(merged.items)} items total)"
    )

    await store.reset(guest_path)
    logger.info(f"[migrate] Cleared guest cart at {guest_path}")

    return merged
