"""Cart document storage"""

import logging
from typing import Optional

from pydantic import ValidationError

from ..core.config import Settings, settings as default_settings
from ..core.errors import CorruptSource, InvalidInput
from ..core.identity import CartIdentifier, CartOwnerKind
from ..models.cart import CartState
from .blobs import BlobStore, create_blob_store

logger = logging.getLogger(__name__)

CART_DOCUMENT = "cart.json"


def cart_path(identifier: CartIdentifier) -> str:
    """Storage path of the cart document owned by identifier"""
    if not identifier.id or "/" in identifier.id or identifier.id in (".", ".."):
        raise InvalidInput(
            f"Unusable cart owner id: {identifier.id!r}",
            public_message="Invalid cart identifier.",
        )

    namespace = "wallets" if identifier.kind == CartOwnerKind.WALLET else "guests"
    return f"{namespace}/{identifier.id}/{CART_DOCUMENT}"


class CartStore:
    """
    Reads and writes cart documents in a blob store.

    One JSON document per owner, no versioning: every save overwrites
    whatever is stored (last writer wins).
    """

    def __init__(self, blobs: BlobStore, settings: Optional[Settings] = None):
        self.blobs = blobs
        self.settings = settings or default_settings

    def path(self, identifier: CartIdentifier) -> str:
        return cart_path(identifier)

    def url(self, path: str) -> str:
        return self.settings.cart_url(path)

    async def exists(self, path: str) -> bool:
        return await self.blobs.exists(path)

    async def _read(self, path: str) -> Optional[bytes]:
        if not await self.blobs.exists(path):
            return None
        return await self.blobs.download(path)

    async def load(self, path: str, tag: str = "load") -> CartState:
        """
        Load the cart at path.

        Missing and unparsable documents both yield the canonical empty
        cart; only storage failures propagate.
        """
        logger.info(f"[{tag}] Attempting to fetch cart from: {path}")
        contents = await self._read(path)

        if contents is None:
            logger.info(f"[{tag}] Cart file not found: {path}. Returning empty cart.")
            return CartState.empty()

        try:
            cart = CartState.model_validate_json(contents)
        except ValidationError as e:
            logger.error(f"[{tag}] Error parsing cart JSON at {path}: {e}")
            return CartState.empty()

        logger.debug(f"[{tag}] Successfully parsed cart JSON.")
        return cart

    async def load_strict(self, path: str, tag: str = "load") -> Optional[CartState]:
        """
        Load the cart at path without masking corruption.

        Returns None when no document exists and raises CorruptSource when
        one exists but cannot be parsed.
        """
        logger.info(f"[{tag}] Attempting to fetch cart from: {path}")
        contents = await self._read(path)

        if contents is None:
            return None

        try:
            return CartState.model_validate_json(contents)
        except ValidationError as e:
            logger.error(f"[{tag}] Error parsing cart JSON at {path}: {e}")
            raise CorruptSource(f"Failed to parse cart data at {path}") from e

    async def save(self, path: str, cart: CartState) -> None:
        """Overwrite the cart document at path"""
        await self.blobs.upload(path, cart.to_json(), "application/json")
        logger.debug(f"Stored cart at {path} ({len(cart.items)} items)")

    async def reset(self, path: str) -> CartState:
        """Overwrite the cart at path with the canonical empty cart"""
        cart = CartState.empty()
        await self.save(path, cart)
        return cart

    def response(self, path: str, cart: CartState) -> CartState:
        """Cart as returned to clients, with its external URL attached"""
        return cart.model_copy(update={"cart_url": self.url(path)})


# Singleton instance
cart_store = CartStore(create_blob_store())


def get_cart_store() -> CartStore:
    """FastAPI dependency returning the cart store"""
    return cart_store
