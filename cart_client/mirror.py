"""
Client Cart Mirror

Holds the last-known server cart for a UI. Every mutation is a round-trip to
the cart service and the local cart is replaced by the server's answer; the
client never predicts outcomes.
"""

import asyncio
import contextlib
import logging
import time
from typing import Any, Callable, Optional

import httpx

from .reducer import (
    CartAction,
    CartState,
    CloseCart,
    ToggleCart,
    UpdateCart,
    cart_reducer,
)

logger = logging.getLogger(__name__)

Listener = Callable[[CartState], None]


class CartMirror:
    """
    Client-side cart state container.

    Round-trips are serialized: at most one request is in flight at a time,
    and the lock is FIFO, so responses are applied in the order requests were
    issued. Each request is tagged with the owner generation it was issued
    for, and its response is dropped if the owner changed in the meantime.

    While the cart UI is closed the mirror polls the server so changes made
    elsewhere (another tab or device) show up.
    """

    def __init__(
        self,
        base_url: str,
        wallet_id: Optional[str] = None,
        poll_interval: float = 5.0,
        http_client: Optional[httpx.AsyncClient] = None,
        cookie_name: str = "cart_session_id",
        timeout: float = 30.0,
    ):
        """
        Initialize cart mirror.

        Args:
            base_url: Base URL of the cart service
            wallet_id: Wallet to target; guest session cookie when None
            poll_interval: Seconds between background refreshes
            http_client: Client to use instead of creating one
            cookie_name: Name of the guest session cookie
            timeout: Request timeout for a client created here
        """
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.cookie_name = cookie_name
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

        self._state = CartState()
        self._wallet_id = wallet_id
        self._listeners: list[Listener] = []

        self._lock = asyncio.Lock()
        self._generation = 0

        self._poll_task: Optional[asyncio.Task] = None
        self._started = False

    # ==================== State ====================

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def wallet_id(self) -> Optional[str]:
        return self._wallet_id

    @property
    def guest_session_id(self) -> Optional[str]:
        """Guest session token held in the client's cookie jar"""
        return self._http_client.cookies.get(self.cookie_name)

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state change listener; returns an unsubscribe callable"""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action: CartAction) -> None:
        new_state = cart_reducer(self._state, action)
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    # ==================== Lifecycle ====================

    async def start(self) -> None:
        """Load the cart and begin background refresh"""
        self._started = True
        await self.fetch_cart()
        self._sync_polling()

    async def close(self) -> None:
        """Stop polling and close the HTTP client if owned"""
        self._started = False
        await self._cancel_polling()
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "CartMirror":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ==================== Requests ====================

    def _params(self) -> dict[str, str]:
        return {"walletId": self._wallet_id} if self._wallet_id else {}

    async def _round_trip(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict[str, str]] = None,
        ignore_statuses: tuple[int, ...] = (),
    ) -> Optional[dict[str, Any]]:
        """Send a request and apply its response if it is still current"""
        generation = self._generation
        query = {**self._params(), **(params or {})}

        async with self._lock:
            if generation != self._generation:
                logger.debug(f"Dropping {method} {path} issued for a previous cart owner")
                return None
            response = await self._http_client.request(
                method,
                f"{self.base_url}{path}",
                params=query,
                json=body,
            )

        if response.status_code in ignore_statuses:
            logger.debug(f"{method} {path} returned {response.status_code}, ignoring")
            return None

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            response.raise_for_status()

        data = response.json()

        if generation != self._generation:
            logger.debug(f"Discarding {method} {path} response for a previous cart owner")
            return None

        self.dispatch(UpdateCart(data))
        return data

    async def fetch_cart(self) -> None:
        """Refresh the local cart from the server"""
        try:
            # Cache-busting timestamp
            await self._round_trip(
                "GET",
                "/api/cart/storage",
                params={"timestamp": str(int(time.time() * 1000))},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching cart: {e}")

    async def add_item(self, product_id: int, quantity: int = 1) -> None:
        """Add an item to the cart"""
        try:
            await self._round_trip(
                "POST",
                "/api/cart/add",
                body={"id": product_id, "quantity": quantity},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to add item: {e}")

    async def remove_item(self, product_id: int) -> None:
        """Remove an item from the cart"""
        try:
            await self._round_trip("POST", "/api/cart/remove", body={"id": product_id})
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to remove item: {e}")

    async def update_quantity(self, product_id: int, quantity: int) -> None:
        """
        Set an item's quantity.

        A 404 means the item left the cart between render and request, so
        it is not treated as a failure.
        """
        try:
            await self._round_trip(
                "POST",
                "/api/cart/update-quantity",
                body={"id": product_id, "quantity": quantity},
                ignore_statuses=(404,),
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to update quantity: {e}")

    async def clear_cart(self) -> None:
        """Clear all items from the cart"""
        try:
            await self._round_trip("POST", "/api/cart/clear")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to clear cart: {e}")

    async def migrate_guest_cart(
        self,
        wallet_id: str,
        guest_session_id: Optional[str] = None,
    ) -> bool:
        """
        Merge this client's guest cart into a wallet cart and target the
        wallet from now on.

        Returns True when the server accepted the migration.
        """
        session_id = guest_session_id or self.guest_session_id
        if not session_id:
            logger.info("No guest session to migrate")
            await self.set_wallet_id(wallet_id)
            return False

        try:
            async with self._lock:
                response = await self._http_client.post(
                    f"{self.base_url}/api/cart/migrate",
                    json={"guestSessionId": session_id, "walletId": wallet_id},
                )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to migrate guest cart: {e}")
            return False

        self._switch_owner(wallet_id)
        self.dispatch(UpdateCart(data))
        return True

    # ==================== Local UI state ====================

    def toggle_cart(self) -> None:
        self.dispatch(ToggleCart())
        self._sync_polling()

    def close_cart(self) -> None:
        self.dispatch(CloseCart())
        self._sync_polling()

    def _switch_owner(self, wallet_id: Optional[str]) -> None:
        self._wallet_id = wallet_id
        self._generation += 1

    async def set_wallet_id(self, wallet_id: Optional[str]) -> None:
        """Target a different cart owner and refetch immediately"""
        if wallet_id == self._wallet_id:
            return
        self._switch_owner(wallet_id)
        logger.info(f"Cart owner changed to {'wallet ' + wallet_id if wallet_id else 'guest session'}")
        await self.fetch_cart()

    # ==================== Polling ====================

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            if self._state.is_open:
                return
            logger.debug("Polling for cart updates...")
            try:
                await self.fetch_cart()
            except Exception:
                logger.exception("Cart refresh failed, will retry")

    def _sync_polling(self) -> None:
        """Poll while the cart is closed, stop while it is open"""
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

        if self._started and not self._state.is_open:
            self._poll_task = asyncio.get_running_loop().create_task(self._poll())

    async def _cancel_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
